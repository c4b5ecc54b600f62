"""Configurable fake marketplace gateway for development and testing.

Simulates the marketplace API without any network calls. It can be told to
fail, making it useful for exercising the checkout's failure path.
"""

from uuid import uuid4

from shopping.checkout.delivery import DELIVERY_OPTIONS
from shopping.checkout.payment import PAYMENT_METHODS
from shopping.gateway.port import GatewayError, MarketplaceGateway
from shopping.gateway.schemas import OrderReference, OrderSubmission


class FakeGateway(MarketplaceGateway):
    """Configurable fake marketplace gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Checkout failed"
        self.status_code: int | None = 500
        self.delivery_options: tuple = DELIVERY_OPTIONS
        self.payment_methods: tuple = PAYMENT_METHODS
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Checkout failed", status_code: int | None = 500) -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.status_code = status_code

    @property
    def submissions(self) -> list[OrderSubmission]:
        return [call["submission"] for call in self.calls if call["method"] == "complete_checkout"]

    async def complete_checkout(self, submission: OrderSubmission) -> OrderReference:
        self.calls.append({"method": "complete_checkout", "submission": submission})

        if not self.should_succeed:
            raise GatewayError(self.failure_reason, status_code=self.status_code)

        return OrderReference(
            id=f"fake_ord_{uuid4().hex[:12]}",
            order_number=f"ORD-{uuid4().hex[:8].upper()}",
            total=submission.total,
        )

    async def fetch_delivery_options(self) -> tuple:
        self.calls.append({"method": "fetch_delivery_options"})
        if not self.should_succeed:
            raise GatewayError(self.failure_reason, status_code=self.status_code)
        return self.delivery_options

    async def fetch_payment_methods(self) -> tuple:
        self.calls.append({"method": "fetch_payment_methods"})
        if not self.should_succeed:
            raise GatewayError(self.failure_reason, status_code=self.status_code)
        return self.payment_methods
