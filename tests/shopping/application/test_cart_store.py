"""Application tests for cart mutations and derived totals."""

import json

import pytest
from protean.exceptions import ValidationError


class TestAddItem:
    def test_add_new_product(self, cart, phone_case):
        cart.add_item(phone_case, quantity=2)
        assert cart.get_quantity("prod-001") == 2
        assert cart.total_items == 2
        assert cart.subtotal == 20000

    def test_default_quantity_is_one(self, cart, phone_case):
        cart.add_item(phone_case)
        assert cart.get_quantity("prod-001") == 1

    def test_adding_again_increments(self, cart, phone_case):
        cart.add_item(phone_case, quantity=1)
        cart.add_item(phone_case, quantity=3)
        assert len(cart.items) == 1
        assert cart.get_quantity("prod-001") == 4

    def test_insertion_order_is_kept(self, cart, phone_case, charger, matooke):
        cart.add_item(charger)
        cart.add_item(phone_case)
        cart.add_item(matooke)
        cart.add_item(charger)
        assert [item.product_id for item in cart.items] == ["prod-002", "prod-001", "prod-003"]

    @pytest.mark.parametrize("quantity", [0, -2])
    def test_non_positive_quantity_is_rejected(self, cart, phone_case, quantity):
        with pytest.raises(ValidationError):
            cart.add_item(phone_case, quantity=quantity)
        assert cart.is_empty

    def test_explicit_seller_is_recorded(self, cart, phone_case, jinja_seller):
        cart.add_item(phone_case, seller=jinja_seller)
        assert cart.items[0].seller == jinja_seller


class TestRemoveAndUpdate:
    def test_remove_item(self, cart, phone_case, charger):
        cart.add_item(phone_case)
        cart.add_item(charger)
        cart.remove_item("prod-001")
        assert not cart.is_in_cart("prod-001")
        assert cart.total_items == 1
        assert cart.subtotal == 25000

    def test_remove_unknown_product_is_a_no_op(self, cart, phone_case, storage):
        cart.add_item(phone_case)
        calls = list(storage.calls)
        cart.remove_item("prod-999")
        assert cart.total_items == 1
        assert storage.calls == calls

    def test_update_quantity(self, cart, phone_case):
        cart.add_item(phone_case)
        cart.update_quantity("prod-001", 5)
        assert cart.get_quantity("prod-001") == 5
        assert cart.subtotal == 50000

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_update_to_zero_or_less_removes(self, cart, phone_case, charger, quantity):
        cart.add_item(phone_case)
        cart.add_item(charger)
        cart.update_quantity("prod-001", quantity)
        assert not cart.is_in_cart("prod-001")
        assert [item.product_id for item in cart.items] == ["prod-002"]

    def test_update_unknown_product_is_ignored(self, cart, phone_case):
        cart.add_item(phone_case)
        cart.update_quantity("prod-999", 3)
        assert [item.product_id for item in cart.items] == ["prod-001"]


class TestClear:
    def test_clear_empties_the_cart(self, cart, phone_case, charger):
        cart.add_item(phone_case, quantity=2)
        cart.add_item(charger)
        cart.clear()
        assert cart.is_empty
        assert cart.total_items == 0
        assert cart.subtotal == 0

    def test_clear_twice(self, cart, phone_case, storage):
        cart.add_item(phone_case)
        cart.clear()
        cart.clear()
        assert cart.is_empty
        assert "cart" not in storage.data


class TestQueries:
    def test_unknown_product(self, cart):
        assert cart.get_quantity("prod-404") == 0
        assert not cart.is_in_cart("prod-404")

    def test_group_by_seller(self, cart, phone_case, matooke, charger):
        cart.add_item(phone_case)
        cart.add_item(matooke, quantity=2)
        cart.add_item(charger)
        groups = cart.group_by_seller()
        assert [(g.seller.name, g.subtotal) for g in groups] == [
            ("Kampala Gadgets", 35000),
            ("Jinja Fresh Foods", 30000),
        ]

    def test_serialized_snapshot_is_a_json_array(self, cart, phone_case):
        cart.add_item(phone_case, quantity=2)
        data = json.loads(cart.serialize())
        assert data == [
            {
                "product": {
                    "_id": "prod-001",
                    "name": "Phone Case",
                    "price": 10000,
                    "stock": 25,
                    "business": {"_id": "biz-kampala", "name": "Kampala Gadgets"},
                },
                "quantity": 2,
                "seller": None,
            }
        ]

    def test_grouping_preserves_totals(self, cart, phone_case, matooke, charger):
        cart.add_item(phone_case, quantity=3)
        cart.add_item(matooke, quantity=2)
        cart.add_item(charger)
        cart.update_quantity("prod-001", 1)
        groups = cart.group_by_seller()
        assert sum(g.total_items for g in groups) == cart.total_items
        assert sum(g.subtotal for g in groups) == cart.subtotal
