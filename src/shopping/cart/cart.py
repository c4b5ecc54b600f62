"""Cart value types: line items, the derived cart state, and seller groups.

A cart line is an immutable snapshot of the product at the time it was added
plus the chosen quantity. ``CartState`` is only ever built from a list of
lines, so its totals cannot drift from the items they summarise.
"""

from dataclasses import dataclass, field

from protean.fields import Integer, String

from shopping.catalogue.product import Product, Seller
from shopping.domain import shopping

UNKNOWN_SELLER_ID = "unknown"


@shopping.value_object
class CartItem:
    product_id = String(required=True, max_length=64)
    name = String(max_length=255)
    price = Integer(min_value=0, default=0)
    stock = Integer(min_value=0, default=0)
    product_seller_id = String(max_length=64)
    product_seller_name = String(max_length=255)
    seller_id = String(max_length=64)  # Explicit seller chosen when adding, if any
    seller_name = String(max_length=255)
    quantity = Integer(required=True, min_value=1)

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def for_product(cls, product, quantity=1, seller=None):
        return cls(
            product_id=product.id,
            name=product.name,
            price=product.price,
            stock=product.stock,
            product_seller_id=product.seller_id,
            product_seller_name=product.seller_name,
            seller_id=seller.id if seller is not None else None,
            seller_name=seller.name if seller is not None else None,
            quantity=quantity,
        )

    def with_quantity(self, quantity):
        """Return a copy of this line with a different quantity."""
        return CartItem(
            product_id=self.product_id,
            name=self.name,
            price=self.price,
            stock=self.stock,
            product_seller_id=self.product_seller_id,
            product_seller_name=self.product_seller_name,
            seller_id=self.seller_id,
            seller_name=self.seller_name,
            quantity=quantity,
        )

    # -------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------
    @property
    def product(self):
        return Product(
            id=self.product_id,
            name=self.name,
            price=self.price,
            stock=self.stock,
            seller_id=self.product_seller_id,
            seller_name=self.product_seller_name,
        )

    @property
    def seller(self):
        """The explicit seller, falling back to the product's own seller."""
        if self.seller_id is not None:
            return Seller(id=self.seller_id, name=self.seller_name)
        if self.product_seller_id is not None:
            return Seller(id=self.product_seller_id, name=self.product_seller_name)
        return None

    @property
    def line_total(self):
        return self.price * self.quantity

    # -------------------------------------------------------------------
    # Snapshot (de)serialization
    # -------------------------------------------------------------------
    def to_api(self):
        explicit = Seller(id=self.seller_id, name=self.seller_name) if self.seller_id is not None else None
        return {
            "product": self.product.to_api(),
            "quantity": self.quantity,
            "seller": explicit.to_api() if explicit is not None else None,
        }

    @classmethod
    def from_api(cls, data):
        return cls.for_product(
            Product.from_api(data["product"]),
            quantity=data["quantity"],
            seller=Seller.from_api(data.get("seller")),
        )


@dataclass(frozen=True)
class CartState:
    """Cart contents with totals derived from the items."""

    items: tuple = ()
    total_items: int = 0
    subtotal: int = 0

    @classmethod
    def from_items(cls, items):
        items = tuple(items)
        return cls(
            items=items,
            total_items=sum(item.quantity for item in items),
            subtotal=sum(item.line_total for item in items),
        )


EMPTY_CART = CartState()


@dataclass(frozen=True)
class SellerGroup:
    """The slice of a cart fulfilled by one seller."""

    seller: Seller
    items: tuple = field(default_factory=tuple)
    subtotal: int = 0

    @property
    def total_items(self):
        return sum(item.quantity for item in self.items)


def group_items_by_seller(items):
    """Partition cart lines by seller, in order of each seller's first line."""
    grouped: dict[str, list] = {}
    sellers: dict[str, Seller] = {}
    for item in items:
        seller = item.seller
        seller_id = seller.id if seller is not None else UNKNOWN_SELLER_ID
        if seller_id not in grouped:
            grouped[seller_id] = []
            sellers[seller_id] = seller if seller is not None else Seller(id=UNKNOWN_SELLER_ID)
        grouped[seller_id].append(item)

    return [
        SellerGroup(
            seller=sellers[seller_id],
            items=tuple(group_items),
            subtotal=sum(item.line_total for item in group_items),
        )
        for seller_id, group_items in grouped.items()
    ]
