"""HTTP adapter for the marketplace REST API (httpx).

All endpoints speak JSON and wrap their results as
``{"success": bool, "message": str, ...}``.
"""

import httpx
import structlog
from protean.exceptions import ValidationError

from shopping.checkout.delivery import delivery_options_from_response
from shopping.checkout.payment import payment_methods_from_response
from shopping.gateway.port import DEFAULT_FAILURE_MESSAGE, GatewayError, MarketplaceGateway
from shopping.gateway.schemas import CheckoutResponse, OrderReference, OrderSubmission

logger = structlog.get_logger(__name__)

CHECKOUT_COMPLETE_PATH = "/api/checkout/complete"
DELIVERY_OPTIONS_PATH = "/api/delivery/options"
PAYMENT_METHODS_PATH = "/api/payments/methods"

CONNECTION_FAILURE_MESSAGE = "Could not reach the marketplace. Check your connection and try again."


class HttpGateway(MarketplaceGateway):
    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.token = token
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers=headers,
            transport=self.transport,
        )

    async def _request(self, method: str, path: str, json: dict | None = None) -> dict:
        try:
            async with self._client() as client:
                response = await client.request(method, path, json=json)
        except httpx.HTTPError as exc:
            logger.warning("marketplace_unreachable", method=method, path=path, error=str(exc))
            raise GatewayError(CONNECTION_FAILURE_MESSAGE) from exc

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if response.is_error or body.get("success") is False:
            logger.warning(
                "marketplace_request_failed",
                method=method,
                path=path,
                status_code=response.status_code,
                message=body.get("message"),
            )
            raise GatewayError(body.get("message") or DEFAULT_FAILURE_MESSAGE, status_code=response.status_code)

        return body

    async def complete_checkout(self, submission: OrderSubmission) -> OrderReference:
        body = await self._request("POST", CHECKOUT_COMPLETE_PATH, json=submission.to_request_body())
        try:
            return CheckoutResponse.model_validate(body).order_reference()
        except ValueError as exc:
            raise _unexpected_response(CHECKOUT_COMPLETE_PATH, exc) from exc

    async def fetch_delivery_options(self) -> tuple:
        body = await self._request("GET", DELIVERY_OPTIONS_PATH)
        try:
            return delivery_options_from_response(body)
        except (ValueError, TypeError, AttributeError, ValidationError) as exc:
            raise _unexpected_response(DELIVERY_OPTIONS_PATH, exc) from exc

    async def fetch_payment_methods(self) -> tuple:
        body = await self._request("GET", PAYMENT_METHODS_PATH)
        try:
            return payment_methods_from_response(body)
        except (TypeError, AttributeError) as exc:
            raise _unexpected_response(PAYMENT_METHODS_PATH, exc) from exc


def _unexpected_response(path: str, exc: Exception) -> GatewayError:
    logger.warning("marketplace_unexpected_response", path=path, error=str(exc))
    return GatewayError(DEFAULT_FAILURE_MESSAGE)
