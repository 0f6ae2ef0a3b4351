"""
Host payment model

The attributes the gateway reads from, and writes back to, the store's
payment records. Any object exposing the same attributes can be passed to
the gateway; these dataclasses are the reference shapes.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, List, Optional

from stripe_gateway.core.logging import get_logger
from stripe_gateway.integrations.payment_gateways.base import PaymentError

logger = get_logger(__name__)


@dataclass
class Country:
    name: str
    iso: Optional[str] = None


@dataclass
class State:
    name: str
    abbr: Optional[str] = None


@dataclass
class Address:
    firstname: str
    lastname: str
    address1: str
    city: str
    zipcode: str
    address2: Optional[str] = None
    state: Optional[State] = None
    country: Optional[Country] = None

    @property
    def full_name(self) -> str:
        return f"{self.firstname} {self.lastname}".strip()


@dataclass
class User:
    email: str


@dataclass
class Order:
    number: str
    bill_address: Optional[Address] = None
    email: Optional[str] = None
    currency: str = "USD"


@dataclass
class CreditCard:
    name: Optional[str] = None
    cc_type: Optional[str] = None
    number: Optional[str] = field(default=None, repr=False)
    month: Optional[int] = None
    year: Optional[int] = None
    verification_value: Optional[str] = field(default=None, repr=False)
    gateway_customer_profile_id: Optional[str] = None
    gateway_payment_profile_id: Optional[str] = None
    payments: List["Payment"] = field(default_factory=list, repr=False, compare=False)
    id: Optional[int] = None

    @property
    def last_digits(self) -> Optional[str]:
        if not self.number:
            return None
        return self.number[-4:]

    def update(self, **fields: Any) -> None:
        """Persist fields on the card record."""
        for name, value in fields.items():
            if not hasattr(self, name):
                raise AttributeError(f"{type(self).__name__} has no attribute {name!r}")
            setattr(self, name, value)

    def __str__(self) -> str:
        # Stable across processes; feeds the idempotency key.
        return "CreditCard(id={}, type={}, last_digits={}, name={})".format(
            self.id, self.cc_type, self.last_digits, self.name
        )


@dataclass
class Payment:
    amount: Decimal
    source: Optional[CreditCard] = None
    order: Optional[Order] = None
    manual: bool = False
    reference_number: Optional[str] = None
    user: Optional[User] = None
    email: Optional[str] = None
    address_line1: Optional[str] = None
    postal_code: Optional[str] = None

    def gateway_error(self, response: Any) -> None:
        """Report a failed gateway response; raises PaymentError."""
        message = getattr(response, "message", None) or "Payment gateway error"
        logger.error(
            "payment.gateway_error",
            reference_number=self.reference_number,
            order_number=self.order.number if self.order else None,
            error_code=getattr(response, "error_code", None),
            message=message,
        )
        raise PaymentError(
            message=message,
            error_code=getattr(response, "error_code", None),
            provider="stripe",
            gateway_response=getattr(response, "params", None),
            transaction_id=getattr(response, "authorization", None),
        )
