"""Shopping bounded context: Shopping Cart and Checkout.

Holds the buyer's cart (persisted as a local snapshot), derives per-seller
groupings, and walks the buyer through address, delivery and payment before
submitting the order to the marketplace API.
"""

from protean.domain import Domain

from shopping.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

shopping = Domain(name="shopping")
