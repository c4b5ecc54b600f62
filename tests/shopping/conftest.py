import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def shopping_bed():
    from shopping.domain import shopping

    bed = DomainFixture(shopping)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(shopping_bed):
    with shopping_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def _reset_adapters():
    """Drop adapter singletons so no test sees another test's gateway or storage."""
    from shopping.gateway import reset_gateway
    from shopping.storage import reset_storage

    yield

    reset_gateway()
    reset_storage()


# ---------------------------------------------------------------------------
# Shared fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def storage():
    from shopping.storage.memory_adapter import MemoryStorage

    return MemoryStorage()


@pytest.fixture()
def gateway():
    from shopping.gateway.fake_adapter import FakeGateway

    return FakeGateway()


@pytest.fixture()
def cart(storage):
    from shopping.cart.store import CartStore

    return CartStore(storage)


@pytest.fixture()
def kampala_seller():
    from shopping.catalogue.product import Seller

    return Seller(id="biz-kampala", name="Kampala Gadgets")


@pytest.fixture()
def jinja_seller():
    from shopping.catalogue.product import Seller

    return Seller(id="biz-jinja", name="Jinja Fresh Foods")


@pytest.fixture()
def phone_case(kampala_seller):
    from shopping.catalogue.product import Product

    return Product(
        id="prod-001",
        name="Phone Case",
        price=10000,
        stock=25,
        seller_id=kampala_seller.id,
        seller_name=kampala_seller.name,
    )


@pytest.fixture()
def charger(kampala_seller):
    from shopping.catalogue.product import Product

    return Product(
        id="prod-002",
        name="USB-C Charger",
        price=25000,
        stock=10,
        seller_id=kampala_seller.id,
        seller_name=kampala_seller.name,
    )


@pytest.fixture()
def matooke(jinja_seller):
    from shopping.catalogue.product import Product

    return Product(
        id="prod-003",
        name="Matooke Bunch",
        price=15000,
        stock=40,
        seller_id=jinja_seller.id,
        seller_name=jinja_seller.name,
    )


@pytest.fixture()
def valid_address():
    return {
        "full_name": "Amina Nakato",
        "phone": "0771234567",
        "district": "Kampala",
        "area": "Ntinda",
        "street": "Plot 12, Ntinda Road",
        "landmark": "Opposite Capital Shoppers",
    }
