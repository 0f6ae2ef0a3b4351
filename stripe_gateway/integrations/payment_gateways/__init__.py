"""
Payment gateway integration modules

Provides the Stripe adapter and the billing client it delegates to.
"""

from .base import (
    BillingClient,
    BillingResponse,
    PaymentError,
    PaymentGateway,
    PaymentGatewayFactory,
    PaymentGatewayType,
)
from .sources import (
    CARD_TYPE_MAPPING,
    PaymentSource,
    RawCard,
    TokenizedCard,
    normalize_card_brand,
)
from .stripe_client import StripeBillingClient
from .stripe_gateway import StripeGateway

PaymentGatewayFactory.register_gateway(PaymentGatewayType.STRIPE, StripeGateway)

__all__ = [
    "BillingClient",
    "BillingResponse",
    "CARD_TYPE_MAPPING",
    "PaymentError",
    "PaymentGateway",
    "PaymentGatewayFactory",
    "PaymentGatewayType",
    "PaymentSource",
    "RawCard",
    "StripeBillingClient",
    "StripeGateway",
    "TokenizedCard",
    "normalize_card_brand",
]
