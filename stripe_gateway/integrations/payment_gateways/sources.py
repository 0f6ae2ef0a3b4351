"""
Payment source resolution

A card handed to the gateway is sent to Stripe either as the card itself or
as a previously stored token, never both.
"""

from dataclasses import dataclass
from typing import Any, Union

# Host card brand labels mapped to the brand names Stripe expects.
CARD_TYPE_MAPPING = {
    "American Express": "american_express",
    "Diners Club": "diners_club",
    "Visa": "visa",
}


def normalize_card_brand(cc_type: Any) -> Any:
    """Return the Stripe brand for cc_type, or cc_type itself when unmapped."""
    return CARD_TYPE_MAPPING.get(cc_type, cc_type)


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


@dataclass(frozen=True)
class RawCard:
    card: Any

    @property
    def argument(self) -> Any:
        return self.card


@dataclass(frozen=True)
class TokenizedCard:
    token: str

    @property
    def argument(self) -> str:
        return self.token


PaymentSource = Union[RawCard, TokenizedCard]


def charge_source(card: Any) -> PaymentSource:
    """Use the stored payment profile when the card has one."""
    token = getattr(card, "gateway_payment_profile_id", None)
    if token:
        return TokenizedCard(token)
    return RawCard(card)


def store_source(card: Any) -> PaymentSource:
    """Only fall back to the token when no card number is on hand."""
    token = getattr(card, "gateway_payment_profile_id", None)
    if is_blank(getattr(card, "number", None)) and not is_blank(token):
        return TokenizedCard(token)
    return RawCard(card)
