"""Marketplace gateway factory.

Provides get_gateway() / set_gateway() / reset_gateway() to swap
implementations:
- FakeGateway for development and testing (default)
- HttpGateway for the real marketplace API

The adapter is chosen by the SHOPPING_GATEWAY environment variable.
"""

import os

import structlog

from shopping.checkout.delivery import DELIVERY_OPTIONS
from shopping.checkout.payment import PAYMENT_METHODS
from shopping.gateway.port import GatewayError, MarketplaceGateway

logger = structlog.get_logger(__name__)

_current_gateway: MarketplaceGateway | None = None


def get_gateway() -> MarketplaceGateway:
    """Return the current marketplace gateway (singleton). Defaults to FakeGateway."""
    global _current_gateway
    if _current_gateway is None:
        adapter = os.environ.get("SHOPPING_GATEWAY", "fake")
        if adapter == "fake":
            from shopping.gateway.fake_adapter import FakeGateway

            _current_gateway = FakeGateway()
        elif adapter == "http":
            from shopping.gateway.http_adapter import HttpGateway

            _current_gateway = HttpGateway(
                base_url=os.environ.get("MARKETPLACE_API_URL", "http://localhost:5000"),
                timeout=float(os.environ.get("MARKETPLACE_API_TIMEOUT", "10")),
                token=os.environ.get("MARKETPLACE_API_TOKEN") or None,
            )
        else:
            raise ValueError(f"Unknown marketplace gateway: {adapter}")
    return _current_gateway


def set_gateway(gateway: MarketplaceGateway) -> None:
    """Override the active gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to the configured default gateway."""
    global _current_gateway
    _current_gateway = None


async def load_delivery_options(gateway: MarketplaceGateway | None = None) -> tuple:
    """Delivery options from the marketplace, or the static catalog if it is unavailable."""
    gateway = gateway or get_gateway()
    try:
        return await gateway.fetch_delivery_options()
    except GatewayError as exc:
        logger.info("delivery_options_fallback", error=exc.message)
        return DELIVERY_OPTIONS


async def load_payment_methods(gateway: MarketplaceGateway | None = None) -> tuple:
    """Payment methods from the marketplace, or the static set if it is unavailable."""
    gateway = gateway or get_gateway()
    try:
        return await gateway.fetch_payment_methods()
    except GatewayError as exc:
        logger.info("payment_methods_fallback", error=exc.message)
        return PAYMENT_METHODS


__all__ = [
    "GatewayError",
    "MarketplaceGateway",
    "get_gateway",
    "load_delivery_options",
    "load_payment_methods",
    "reset_gateway",
    "set_gateway",
]
