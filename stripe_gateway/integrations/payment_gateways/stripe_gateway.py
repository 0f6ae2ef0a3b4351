"""
Stripe Payment Gateway

Translates the store's payment operations into Stripe billing client calls
and writes the identifiers Stripe hands back onto the payment source.
"""

import hashlib
from typing import Any, Dict, Mapping, Optional

from stripe_gateway.core.config import (
    GatewayPreferences,
    Settings,
    get_settings,
    resolve_environment,
    resolve_publishable_key,
    resolve_secret_key,
    resolve_test_mode,
)
from stripe_gateway.core.logging import get_logger

from .base import (
    BillingClient,
    BillingResponse,
    ChargeArguments,
    PaymentGateway,
    PaymentGatewayType,
)
from .sources import charge_source, normalize_card_brand, store_source
from .stripe_client import StripeBillingClient

logger = get_logger(__name__)

MANUAL_PAYMENT_CURRENCY = "USD"


def order_id_from(context: Mapping[str, Any]) -> str:
    """Strip the payment suffix from the order number, "R100-1" -> "R100"."""
    return str(context["order_id"]).split("-")[0]


def idempotency_key(card: Any, order_id: Optional[str] = None) -> str:
    return hashlib.md5(f"{order_id or ''}{card}".encode("utf-8")).hexdigest()


class StripeGateway(PaymentGateway):
    """Stripe payment gateway adapter."""

    gateway_class = StripeBillingClient
    partial_name = "stripe"

    def __init__(
        self,
        preferences: Optional[GatewayPreferences] = None,
        *,
        client: Optional[BillingClient] = None,
        environ: Optional[Mapping[str, str]] = None,
        production: Optional[bool] = None,
        settings: Optional[Settings] = None,
        **config
    ):
        """
        Initialize the Stripe gateway.

        Args:
            preferences: Stored secret and publishable keys
            client: Billing client to delegate to; built from the resolved
                secret key and test mode when omitted
            environ: Environment used for key overrides, os.environ by default
            production: Deployment mode, read from settings when omitted
            settings: Application settings
            **config: Additional configuration
        """
        super().__init__(**config)
        self.preferences = preferences or GatewayPreferences()
        self.settings = settings
        self._client = client
        self._environ = environ
        self._production = production

    def _get_gateway_type(self) -> PaymentGatewayType:
        """Return the gateway type identifier."""
        return PaymentGatewayType.STRIPE

    @property
    def gateway(self) -> BillingClient:
        if self._client is None:
            self._client = self.gateway_class(
                login=self.resolve_secret_key(),
                test=self.resolve_test_mode(),
                settings=self.settings,
            )
        return self._client

    # Configuration

    def resolve_secret_key(self) -> Optional[str]:
        return resolve_secret_key(self.preferences, self._environ)

    def resolve_publishable_key(self) -> Optional[str]:
        return resolve_publishable_key(self.preferences, self._environ)

    def resolve_environment(self) -> str:
        return resolve_environment(self._is_production())

    def resolve_test_mode(self) -> bool:
        return resolve_test_mode(self._is_production())

    def _is_production(self) -> bool:
        if self._production is not None:
            return self._production
        return (self.settings or get_settings()).is_production

    def supports_customer_profiles(self) -> bool:
        return True

    # Charge operations

    def purchase(self, amount: int, card: Any, context: Dict[str, Any]) -> BillingResponse:
        arguments = self.build_charge_options(amount, card, context)
        self._log_charge("stripe_gateway.purchase", arguments)
        return self.gateway.purchase(*arguments)

    def authorize(self, amount: int, card: Any, context: Dict[str, Any]) -> BillingResponse:
        arguments = self.build_charge_options(amount, card, context)
        self._log_charge("stripe_gateway.authorize", arguments)
        return self.gateway.authorize(*arguments)

    def capture(self, amount: int, transaction_ref: str, context: Dict[str, Any]) -> BillingResponse:
        logger.info("stripe_gateway.capture", amount=amount, transaction_ref=transaction_ref)
        return self.gateway.capture(amount, transaction_ref, context)

    def credit(self, amount: int, card: Any, transaction_ref: str, context: Dict[str, Any]) -> BillingResponse:
        # Refunds are keyed by the transaction alone; card and context are unused.
        logger.info("stripe_gateway.credit", amount=amount, transaction_ref=transaction_ref)
        return self.gateway.refund(amount, transaction_ref, {})

    def void(self, transaction_ref: str, card: Any, context: Dict[str, Any]) -> BillingResponse:
        logger.info("stripe_gateway.void", transaction_ref=transaction_ref)
        return self.gateway.void(transaction_ref, {})

    def cancel(self, transaction_ref: str) -> BillingResponse:
        logger.info("stripe_gateway.cancel", transaction_ref=transaction_ref)
        return self.gateway.void(transaction_ref, {})

    # Customer profiles

    def create_profile(self, payment: Any) -> None:
        source = payment.source
        if source.gateway_customer_profile_id is not None:
            return

        options: Dict[str, Any] = {
            "description": self._name_on_card(payment),
            "email": getattr(payment, "email", None),
            "login": self.resolve_secret_key(),
        }
        options.update(self.address_for(payment))

        cc_type = normalize_card_brand(source.cc_type)
        stored = store_source(source)

        logger.info(
            "stripe_gateway.create_profile.request",
            manual=payment.manual,
            tokenized=stored.argument is not source,
        )
        response = self.gateway.store(stored.argument, options)

        if response.is_success():
            source.update(
                cc_type=cc_type,
                gateway_customer_profile_id=response.get("id"),
                gateway_payment_profile_id=response.get("default_source") or response.get("default_card"),
            )
            logger.info("stripe_gateway.create_profile.stored", customer_id=response.get("id"))
        else:
            logger.warning("stripe_gateway.create_profile.failed", error_code=getattr(response, "error_code", None))
            payment.gateway_error(response)

    # Option builders

    def build_charge_options(self, amount: int, card: Any, context: Dict[str, Any]) -> ChargeArguments:
        """
        Build the positional arguments for a purchase or authorization.

        The payment options (and so the idempotency key) are computed from the
        card as passed in, before a stored token replaces it.

        Returns:
            (amount, card or token, options)
        """
        options = self.build_payment_options(card, context)

        customer_id = getattr(card, "gateway_customer_profile_id", None)
        if customer_id:
            options["customer"] = customer_id

        return amount, charge_source(card).argument, options

    def build_payment_options(self, card: Any, context: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        # No context means the payment is not attached to an order.
        if context:
            return self._standard_payment_options(card, context)
        return self._manual_payment_options(card)

    def _standard_payment_options(self, card: Any, context: Dict[str, Any]) -> Dict[str, Any]:
        order_id = order_id_from(context)
        billing_name = (context.get("billing_address") or {}).get("name") or ""

        return {
            "description": f"{billing_name} (Order #{order_id})",
            "currency": context.get("currency"),
            "idempotency_key": idempotency_key(card, order_id),
            "metadata": {
                "Purchase Order Number": order_id,
                "IP Address": context.get("ip"),
            },
        }

    def _manual_payment_options(self, card: Any) -> Dict[str, Any]:
        payments = getattr(card, "payments", None) or []
        payment = payments[0] if payments else None
        user = getattr(payment, "user", None)

        return {
            "description": f"{getattr(card, 'name', None)} (Manual Payment)",
            "currency": MANUAL_PAYMENT_CURRENCY,
            "idempotency_key": idempotency_key(card),
            "metadata": {
                "Purchase Order Number": getattr(payment, "reference_number", None),
                "Admin User": user.email if user else "",
            },
        }

    def address_for(self, payment: Any) -> Dict[str, Any]:
        if payment.manual:
            return {
                "address": {
                    "address1": payment.address_line1,
                    "zip": payment.postal_code,
                }
            }

        address = payment.order.bill_address
        fields = {
            "address1": address.address1,
            "address2": address.address2,
            "city": address.city,
            "zip": address.zipcode,
        }
        if address.country:
            fields["country"] = address.country.name
        if address.state:
            fields["state"] = address.state.name
        return {"address": fields}

    def _name_on_card(self, payment: Any) -> Optional[str]:
        if payment.manual:
            return payment.source.name
        return payment.order.bill_address.full_name

    def _log_charge(self, event: str, arguments: ChargeArguments) -> None:
        amount, card, options = arguments
        logger.info(
            event,
            amount=amount,
            currency=options.get("currency"),
            order_id=options["metadata"].get("Purchase Order Number"),
            tokenized=isinstance(card, str),
            customer=options.get("customer"),
        )
