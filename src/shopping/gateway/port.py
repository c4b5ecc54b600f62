"""Marketplace gateway port (abstract interface).

Defines the contract every marketplace API adapter implements, so the
checkout can run against the FakeGateway (dev/test) or the HttpGateway
(production) without changing any domain code.
"""

from abc import ABC, abstractmethod

from shopping.gateway.schemas import OrderReference, OrderSubmission

DEFAULT_FAILURE_MESSAGE = "Something went wrong. Please try again."


class GatewayError(Exception):
    """A marketplace call failed: transport error or a non-success response.

    ``message`` is safe to show to the buyer.
    """

    def __init__(self, message: str = DEFAULT_FAILURE_MESSAGE, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def to_dict(self) -> dict:
        return {"message": self.message, "status_code": self.status_code}


class MarketplaceGateway(ABC):
    """Abstract marketplace API."""

    @abstractmethod
    async def complete_checkout(self, submission: OrderSubmission) -> OrderReference:
        """Submit a finished order. Raises GatewayError on failure."""
        ...

    @abstractmethod
    async def fetch_delivery_options(self) -> tuple:
        """Delivery options currently offered, as DeliveryOption value objects."""
        ...

    @abstractmethod
    async def fetch_payment_methods(self) -> tuple:
        """Payment methods currently accepted, as PaymentMethod members."""
        ...
