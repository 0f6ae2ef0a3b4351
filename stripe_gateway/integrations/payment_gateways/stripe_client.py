"""
Stripe Billing Client

Implements the BillingClient capability set on top of the official Stripe
SDK. Provider errors are returned as failed BillingResponse objects.
"""

from typing import Any, Callable, Dict, Optional

from stripe import AuthenticationError, StripeClient, StripeError

from stripe_gateway.core.config import Settings, get_settings
from stripe_gateway.core.logging import get_logger

from .base import BillingClient, BillingResponse

logger = get_logger(__name__)

LIVE_KEY_PREFIXES = ("sk_live_", "rk_live_")

PURCHASE_SUCCESS_STATUSES = {"succeeded", "processing"}
AUTHORIZE_SUCCESS_STATUSES = {"requires_capture", "succeeded", "processing"}
REFUND_SUCCESS_STATUSES = {"succeeded", "pending"}

_ADDRESS_FIELDS = {
    "address1": "line1",
    "address2": "line2",
    "city": "city",
    "state": "state",
    "zip": "postal_code",
    "country": "country",
}


class StripeBillingClient(BillingClient):
    """Stripe billing client."""

    def __init__(
        self,
        login: Optional[str],
        test: bool = True,
        client: Optional[StripeClient] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize the Stripe client.

        Args:
            login: Stripe secret API key
            test: Whether the gateway runs against Stripe test mode
            client: Pre-built StripeClient, mostly for tests
            settings: Settings providing API version and SDK retries
        """
        self.login = login
        self.test = test
        self.settings = settings or get_settings()
        self._client = client

    @property
    def client(self) -> StripeClient:
        if self._client is None:
            if not self.login:
                raise AuthenticationError("No Stripe secret key configured")
            self._client = StripeClient(
                self.login,
                stripe_version=self.settings.stripe_api_version,
                max_network_retries=self.settings.stripe_max_network_retries,
            )
        return self._client

    def purchase(self, amount: int, card: Any, options: Dict[str, Any]) -> BillingResponse:
        return self._execute(
            "purchase",
            lambda client: self._create_payment_intent(client, amount, card, options, capture_method="automatic"),
            lambda params: params.get("status") in PURCHASE_SUCCESS_STATUSES,
        )

    def authorize(self, amount: int, card: Any, options: Dict[str, Any]) -> BillingResponse:
        return self._execute(
            "authorize",
            lambda client: self._create_payment_intent(client, amount, card, options, capture_method="manual"),
            lambda params: params.get("status") in AUTHORIZE_SUCCESS_STATUSES,
        )

    def capture(self, amount: int, authorization: str, options: Dict[str, Any]) -> BillingResponse:
        return self._execute(
            "capture",
            lambda client: client.v1.payment_intents.capture(
                authorization, params={"amount_to_capture": amount}
            ),
            lambda params: params.get("status") == "succeeded",
        )

    def refund(self, amount: Optional[int], authorization: str, options: Dict[str, Any]) -> BillingResponse:
        def call(client: StripeClient) -> Any:
            target = "charge" if authorization.startswith("ch_") else "payment_intent"
            params: Dict[str, Any] = {target: authorization}
            if amount is not None:
                params["amount"] = amount
            return client.v1.refunds.create(params=params, options=self._request_options(options))

        return self._execute(
            "refund",
            call,
            lambda params: params.get("status") in REFUND_SUCCESS_STATUSES,
        )

    def void(self, authorization: str, options: Dict[str, Any]) -> BillingResponse:
        return self._execute(
            "void",
            lambda client: client.v1.payment_intents.cancel(authorization, params={}),
            lambda params: params.get("status") == "canceled",
        )

    def store(self, card: Any, options: Dict[str, Any]) -> BillingResponse:
        def call(client: StripeClient) -> Any:
            params: Dict[str, Any] = {"source": self._card_token(client, card)}
            if options.get("description"):
                params["description"] = options["description"]
            if options.get("email"):
                params["email"] = options["email"]
            address = self._stripe_address(options.get("address"))
            if address:
                params["address"] = address
            return client.v1.customers.create(params=params, options=self._request_options(options))

        return self._execute("store", call, lambda params: bool(params.get("id")))

    def _execute(
        self,
        action: str,
        call: Callable[[StripeClient], Any],
        succeeded: Callable[[Dict[str, Any]], bool],
    ) -> BillingResponse:
        mismatch = self._mode_mismatch()
        if mismatch:
            logger.warning("stripe_client.mode_mismatch", action=action, test=self.test)
            return BillingResponse(success=False, message=mismatch, error_code="livemode_mismatch", test=self.test)

        try:
            stripe_object = call(self.client)
        except StripeError as e:
            logger.warning(
                "stripe_client.error",
                action=action,
                error_code=e.code,
                http_status=e.http_status,
            )
            return BillingResponse(
                success=False,
                message=e.user_message or str(e),
                params=dict(e.json_body or {}),
                error_code=e.code,
                test=self.test,
            )

        params = dict(stripe_object)
        return BillingResponse(
            success=succeeded(params),
            message=params.get("status") or "",
            params=params,
            authorization=params.get("id"),
            test=self.test,
        )

    def _mode_mismatch(self) -> Optional[str]:
        if not self.login:
            return None
        live_key = self.login.startswith(LIVE_KEY_PREFIXES)
        if self.test and live_key:
            return "Live Stripe key used while the gateway is in test mode"
        if not self.test and not live_key:
            return "Test Stripe key used while the gateway is in production mode"
        return None

    def _create_payment_intent(
        self,
        client: StripeClient,
        amount: int,
        card: Any,
        options: Dict[str, Any],
        capture_method: str,
    ) -> Any:
        params: Dict[str, Any] = {
            "amount": amount,
            "confirm": True,
            "capture_method": capture_method,
            "payment_method_types": ["card"],
        }
        # Stripe rejects a payment intent without a currency.
        if options.get("currency"):
            params["currency"] = options["currency"].lower()
        if isinstance(card, str):
            params["payment_method"] = card
        else:
            params["payment_method_data"] = {"type": "card", "card": {"token": self._card_token(client, card)}}
        if options.get("customer"):
            params["customer"] = options["customer"]
        if options.get("description"):
            params["description"] = options["description"]
        metadata = self._metadata(options.get("metadata"))
        if metadata:
            params["metadata"] = metadata

        return client.v1.payment_intents.create(params=params, options=self._request_options(options))

    def _card_token(self, client: StripeClient, card: Any) -> str:
        if isinstance(card, str):
            return card
        token = client.v1.tokens.create(params={
            "card": {
                "number": card.number,
                "exp_month": card.month,
                "exp_year": card.year,
                "cvc": card.verification_value,
                "name": card.name,
            }
        })
        return token["id"]

    @staticmethod
    def _request_options(options: Dict[str, Any]) -> Dict[str, Any]:
        if options.get("idempotency_key"):
            return {"idempotency_key": options["idempotency_key"]}
        return {}

    @staticmethod
    def _metadata(metadata: Optional[Dict[str, Any]]) -> Dict[str, str]:
        # Stripe metadata values must be strings
        return {key: str(value) for key, value in (metadata or {}).items() if value is not None}

    @staticmethod
    def _stripe_address(address: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        return {
            _ADDRESS_FIELDS[key]: value
            for key, value in (address or {}).items()
            if key in _ADDRESS_FIELDS and value is not None
        }
