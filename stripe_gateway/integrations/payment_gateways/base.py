"""
Payment Gateway Base Classes and Interfaces

Defines the contract between the host payment subsystem, the gateway
adapters and the billing clients they delegate to.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class PaymentGatewayType(str, Enum):
    """Supported payment gateway types."""
    STRIPE = "stripe"


@dataclass
class BillingResponse:
    """Result of a billing client call."""
    success: bool
    message: str = ""
    params: Dict[str, Any] = field(default_factory=dict)
    authorization: Optional[str] = None
    error_code: Optional[str] = None
    test: bool = False

    def is_success(self) -> bool:
        return self.success

    def get(self, name: str, default: Any = None) -> Any:
        """Read a field of the provider payload."""
        return self.params.get(name, default)


class PaymentError(Exception):
    """Payment gateway specific errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        provider: Optional[str] = None,
        gateway_response: Optional[Dict[str, Any]] = None,
        transaction_id: Optional[str] = None
    ):
        super().__init__(message)
        self.error_message = message
        self.error_code = error_code
        self.provider = provider
        self.gateway_response = gateway_response
        self.transaction_id = transaction_id


class BillingClient(ABC):
    """
    Capability set consumed by gateway adapters.

    Every call is synchronous and returns a response exposing is_success()
    and get(field). Provider failures come back as unsuccessful responses,
    they are not raised.
    """

    @abstractmethod
    def purchase(self, amount: int, card: Any, options: Dict[str, Any]) -> BillingResponse:
        """Authorize and capture amount (minor units) against a card or token."""

    @abstractmethod
    def authorize(self, amount: int, card: Any, options: Dict[str, Any]) -> BillingResponse:
        """Authorize amount without capturing it."""

    @abstractmethod
    def capture(self, amount: int, authorization: str, options: Dict[str, Any]) -> BillingResponse:
        """Capture a previous authorization."""

    @abstractmethod
    def refund(self, amount: Optional[int], authorization: str, options: Dict[str, Any]) -> BillingResponse:
        """Refund a captured transaction; None refunds it in full."""

    @abstractmethod
    def void(self, authorization: str, options: Dict[str, Any]) -> BillingResponse:
        """Cancel an uncaptured authorization."""

    @abstractmethod
    def store(self, card: Any, options: Dict[str, Any]) -> BillingResponse:
        """Create a customer profile holding the card or token."""


class PaymentGateway(ABC):
    """Abstract base class for payment gateway adapters."""

    def __init__(self, **config):
        """Initialize the payment gateway with configuration."""
        self.config = config
        self.gateway_type = self._get_gateway_type()

    @abstractmethod
    def _get_gateway_type(self) -> PaymentGatewayType:
        """Return the gateway type identifier."""
        pass

    @abstractmethod
    def purchase(self, amount: int, card: Any, context: Dict[str, Any]) -> BillingResponse:
        pass

    @abstractmethod
    def authorize(self, amount: int, card: Any, context: Dict[str, Any]) -> BillingResponse:
        pass

    @abstractmethod
    def capture(self, amount: int, transaction_ref: str, context: Dict[str, Any]) -> BillingResponse:
        pass

    @abstractmethod
    def credit(self, amount: int, card: Any, transaction_ref: str, context: Dict[str, Any]) -> BillingResponse:
        pass

    @abstractmethod
    def void(self, transaction_ref: str, card: Any, context: Dict[str, Any]) -> BillingResponse:
        pass

    @abstractmethod
    def cancel(self, transaction_ref: str) -> BillingResponse:
        pass

    @abstractmethod
    def create_profile(self, payment: Any) -> None:
        """
        Store the payment source with the provider.

        Implementations persist the returned identifiers on payment.source,
        or hand the failed response to payment.gateway_error.
        """
        pass

    def supports_customer_profiles(self) -> bool:
        """
        Whether the gateway can keep reusable customer references.

        Returns:
            False unless overridden
        """
        return False


ChargeArguments = Tuple[int, Any, Dict[str, Any]]


class PaymentGatewayFactory:
    """Factory for creating payment gateway instances."""

    _gateways: Dict[PaymentGatewayType, type] = {}

    @classmethod
    def register_gateway(
        cls,
        gateway_type: PaymentGatewayType,
        gateway_class: type[PaymentGateway]
    ):
        """Register a payment gateway implementation."""
        cls._gateways[gateway_type] = gateway_class

    @classmethod
    def create_gateway(
        cls,
        gateway_type: PaymentGatewayType,
        **config
    ) -> PaymentGateway:
        """Create a payment gateway instance."""
        if gateway_type not in cls._gateways:
            raise ValueError(f"Unsupported gateway type: {gateway_type}")

        gateway_class = cls._gateways[gateway_type]
        return gateway_class(**config)

    @classmethod
    def get_supported_gateways(cls) -> List[PaymentGatewayType]:
        """Get list of registered gateway types."""
        return list(cls._gateways.keys())
