"""Pydantic schemas for the marketplace checkout API.

These are the wire contracts (anti-corruption layer) between the checkout and
the marketplace backend, separate from the shopping domain's value objects.
The backend speaks camelCase JSON.
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Order submission (POST /api/checkout/complete)
# ---------------------------------------------------------------------------
class OrderItemPayload(_CamelModel):
    product: str
    quantity: int = Field(ge=1)
    price: int = Field(ge=0)


class ShippingAddressPayload(_CamelModel):
    full_name: str
    phone: str
    district: str
    area: str
    street: str = ""
    landmark: str = ""


class OrderSubmission(_CamelModel):
    items: list[OrderItemPayload] = Field(min_length=1)
    shipping_address: ShippingAddressPayload
    delivery_method: str
    delivery_fee: int = Field(ge=0)
    payment_method: str
    mobile_number: str | None = None
    subtotal: int = Field(ge=0)
    total: int = Field(ge=0)

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "items": [{"product": "prod-001", "quantity": 2, "price": 10000}],
                    "shippingAddress": {
                        "fullName": "Amina Nakato",
                        "phone": "0771234567",
                        "district": "Kampala",
                        "area": "Ntinda",
                        "street": "",
                        "landmark": "",
                    },
                    "deliveryMethod": "faras",
                    "deliveryFee": 8000,
                    "paymentMethod": "cod",
                    "subtotal": 20000,
                    "total": 28000,
                }
            ]
        }
    )

    @model_validator(mode="after")
    def total_is_subtotal_plus_delivery(self):
        if self.total != self.subtotal + self.delivery_fee:
            raise ValueError("total must equal subtotal + delivery fee")
        return self

    def to_request_body(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------
class OrderReference(BaseModel):
    """The order the marketplace created for a successful checkout."""

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    id: str | None = Field(default=None, validation_alias=AliasChoices("id", "_id"))
    order_number: str | None = Field(default=None, validation_alias=AliasChoices("orderNumber", "order_number"))
    total: int | None = Field(default=None, validation_alias=AliasChoices("total", "totalPrice"))


class CheckoutResponse(BaseModel):
    success: bool = True
    message: str | None = None
    order: OrderReference | None = None
    orders: list[OrderReference] = Field(default_factory=list)

    def order_reference(self) -> OrderReference:
        """The created order; multi-seller checkouts report the first one."""
        if self.order is not None:
            return self.order
        if self.orders:
            return self.orders[0]
        return OrderReference()
