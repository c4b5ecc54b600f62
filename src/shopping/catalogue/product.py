"""Catalogue value objects the cart depends on.

Products and sellers are owned by the marketplace backend. The shopping
context only keeps the snapshot it needs to price a cart and group it by
seller.
"""

from protean.fields import Integer, String

from shopping.domain import shopping


@shopping.value_object
class Seller:
    """The business that owns and fulfils a product."""

    id = String(required=True, max_length=64)
    name = String(max_length=255)

    @classmethod
    def from_api(cls, data):
        """Build from the API shape (``{"_id": ..., "name": ...}`` or a bare id). Returns None for empty data."""
        if not data:
            return None
        if isinstance(data, (str, int)):
            return cls(id=data)
        if not isinstance(data, dict):
            return None
        seller_id = data.get("_id", data.get("id"))
        if seller_id is None:
            return None
        return cls(id=seller_id, name=data.get("name"))

    def to_api(self):
        return {"_id": self.id, "name": self.name}


@shopping.value_object
class Product:
    """A catalogue product as seen by the buyer at the time it was added."""

    id = String(required=True, max_length=64)
    name = String(max_length=255)
    price = Integer(min_value=0, default=0)
    stock = Integer(min_value=0, default=0)
    seller_id = String(max_length=64)
    seller_name = String(max_length=255)

    @property
    def seller(self):
        if self.seller_id is None:
            return None
        return Seller(id=self.seller_id, name=self.seller_name)

    @classmethod
    def from_api(cls, data):
        """Build from the marketplace API product shape.

        The owning seller is nested under ``business`` (an object or a bare id);
        flat ``businessId``/``businessName`` keys are used when it is absent.
        """
        business = Seller.from_api(data.get("business"))
        if business is None:
            business = Seller.from_api(data.get("businessId"))
        if business is not None and business.name is None and data.get("businessName"):
            business = Seller(id=business.id, name=data["businessName"])
        return cls(
            id=data.get("_id", data.get("id")),
            name=data.get("name"),
            price=data.get("price") or 0,
            stock=data.get("stock") or 0,
            seller_id=business.id if business is not None else None,
            seller_name=business.name if business is not None else None,
        )

    def to_api(self):
        seller = self.seller
        return {
            "_id": self.id,
            "name": self.name,
            "price": self.price,
            "stock": self.stock,
            "business": seller.to_api() if seller is not None else None,
        }
