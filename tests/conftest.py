"""
Shared test configuration and fixtures for the Stripe gateway suite.
"""

from decimal import Decimal
from unittest.mock import Mock

import pytest

from stripe_gateway import Address, Country, CreditCard, Order, Payment, State
from stripe_gateway.core.config import GatewayPreferences
from stripe_gateway.integrations.payment_gateways import BillingResponse, StripeGateway


@pytest.fixture
def secret_key():
    return "sk_test_key"


@pytest.fixture
def bill_address():
    return Address(
        firstname="Roger",
        lastname="Sanderson",
        address1="123 Happy Road",
        address2="Apt 303",
        city="Suzarac",
        zipcode="95671",
        state=State(name="Oregon", abbr="OR"),
        country=Country(name="United States", iso="US"),
    )


@pytest.fixture
def order(bill_address):
    return Order(number="R100", bill_address=bill_address, email="customer@example.com")


@pytest.fixture
def credit_card():
    return CreditCard(
        id=1,
        name="Roger Sanderson",
        cc_type="Visa",
        number="4242424242424242",
        month=12,
        year=2030,
        verification_value="123",
    )


@pytest.fixture
def payment(order, credit_card):
    payment = Payment(amount=Decimal("19.99"), source=credit_card, order=order)
    credit_card.payments.append(payment)
    return payment


@pytest.fixture
def billing_client():
    client = Mock()
    client.store.return_value = BillingResponse(
        success=True,
        params={"id": "cus_abc", "default_source": "card_abc"},
        authorization="cus_abc",
    )
    return client


@pytest.fixture
def gateway(billing_client, secret_key):
    return StripeGateway(
        GatewayPreferences(secret_key=secret_key, publishable_key="pk_test_key"),
        client=billing_client,
        environ={},
        production=False,
    )
