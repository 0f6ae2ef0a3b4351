"""
Stripe payment gateway for the store's payment subsystem.
"""

from stripe_gateway.integrations.payment_gateways import (
    BillingResponse,
    PaymentError,
    PaymentGatewayFactory,
    PaymentGatewayType,
    StripeBillingClient,
    StripeGateway,
)
from stripe_gateway.host import Address, Country, CreditCard, Order, Payment, State, User

__all__ = [
    "Address",
    "BillingResponse",
    "Country",
    "CreditCard",
    "Order",
    "Payment",
    "State",
    "User",
    "PaymentError",
    "PaymentGatewayFactory",
    "PaymentGatewayType",
    "StripeBillingClient",
    "StripeGateway",
]
