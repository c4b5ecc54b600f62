"""Shared BDD fixtures and step definitions for checkout."""

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then
from shopping.catalogue.product import Product
from shopping.checkout.checkout import Checkout, CheckoutStep


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a cart holding {qty:d} "{name}" at {price:d} UGX each'), target_fixture="checkout")
def cart_holding(cart, gateway, kampala_seller, qty, name, price):
    product = Product(
        id="prod-001",
        name=name,
        price=price,
        stock=50,
        seller_id=kampala_seller.id,
        seller_name=kampala_seller.name,
    )
    cart.add_item(product, quantity=qty)
    return Checkout(cart, gateway=gateway)


@given("the buyer confirmed a valid Kampala address")
def confirmed_address(checkout, valid_address):
    checkout.update_address(**valid_address)
    checkout.confirm_address()


@given(parsers.cfparse('the marketplace rejects orders with "{reason}"'))
def marketplace_rejects(gateway, reason):
    gateway.configure(should_succeed=False, failure_reason=reason, status_code=400)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the checkout is "{step}"'))
def checkout_is_at(checkout, step):
    assert checkout.step == CheckoutStep(step)


@then(parsers.cfparse('the checkout is rejected for "{field_name}"'))
def checkout_rejected_for(error, field_name):
    assert isinstance(error["exc"], ValidationError)
    assert field_name in error["exc"].messages


@then(parsers.cfparse('the checkout is rejected with "{message}"'))
def checkout_rejected_with(error, message):
    assert isinstance(error["exc"], ValidationError)
    assert message in [m for messages in error["exc"].messages.values() for m in messages]


@then(parsers.cfparse("the checkout total is {total:d} UGX"))
def checkout_total(checkout, total):
    assert checkout.total == total
