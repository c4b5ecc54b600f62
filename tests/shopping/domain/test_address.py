import pytest
from protean.exceptions import ValidationError
from shopping.checkout.address import Address, address_errors


def test_valid_address(valid_address):
    address = Address(**valid_address)
    assert address.full_name == "Amina Nakato"
    assert address.landmark == "Opposite Capital Shoppers"


def test_optional_fields_may_be_omitted():
    address = Address(full_name="Okello John", phone="0701234567", district="Gulu", area="Layibi")
    assert address.street is None


def test_address_rejects_invalid_phone(valid_address):
    with pytest.raises((ValueError, ValidationError)):
        Address(**{**valid_address, "phone": "123"})


def test_address_requires_district(valid_address):
    data = dict(valid_address)
    del data["district"]
    with pytest.raises(ValidationError):
        Address(**data)


class TestAddressErrors:
    def test_no_errors_for_complete_draft(self, valid_address):
        assert address_errors(valid_address) == {}

    def test_names_every_missing_field(self):
        errors = address_errors({"full_name": "  ", "phone": "", "district": "Mbarara"})
        assert set(errors) == {"full_name", "phone", "area"}

    def test_invalid_phone(self, valid_address):
        errors = address_errors({**valid_address, "phone": "123"})
        assert errors == {"phone": ["Please enter a valid Uganda phone number"]}

    def test_street_and_landmark_are_optional(self, valid_address):
        assert address_errors({**valid_address, "street": "", "landmark": ""}) == {}
