"""Delivery address captured during checkout."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from shopping.domain import shopping
from shopping.shared.phone import is_valid_uganda_phone

ADDRESS_FIELDS = ("full_name", "phone", "district", "area", "street", "landmark")
REQUIRED_ADDRESS_FIELDS = ("full_name", "phone", "district", "area")


@shopping.value_object
class Address:
    """Where the order is delivered and who receives it.

    Once confirmed the address is fixed for this checkout; going back to the
    address step edits a draft and confirms a new Address.
    """

    full_name = String(required=True, max_length=255)
    phone = String(required=True, max_length=20)
    district = String(required=True, max_length=100)
    area = String(required=True, max_length=255)
    street = String(max_length=255)
    landmark = String(max_length=255)

    @invariant.post
    def phone_must_be_a_uganda_mobile_number(self):
        if not is_valid_uganda_phone(self.phone):
            raise ValidationError({"phone": ["Please enter a valid Uganda phone number"]})


def address_errors(draft):
    """Field-keyed problems with an address draft; empty when it can be confirmed."""
    errors = {}
    for field_name in REQUIRED_ADDRESS_FIELDS:
        if not (draft.get(field_name) or "").strip():
            errors[field_name] = ["is required"]
    phone = (draft.get("phone") or "").strip()
    if phone and not is_valid_uganda_phone(phone):
        errors["phone"] = ["Please enter a valid Uganda phone number"]
    return errors
