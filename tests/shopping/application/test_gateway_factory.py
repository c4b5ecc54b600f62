import asyncio

import pytest
from shopping.checkout.delivery import DELIVERY_OPTIONS, DeliveryOption
from shopping.checkout.payment import PAYMENT_METHODS, PaymentMethod
from shopping.gateway import (
    get_gateway,
    load_delivery_options,
    load_payment_methods,
    reset_gateway,
    set_gateway,
)
from shopping.gateway.fake_adapter import FakeGateway
from shopping.gateway.http_adapter import HttpGateway


class TestGatewayFactory:
    def test_default_is_fake(self, monkeypatch):
        monkeypatch.delenv("SHOPPING_GATEWAY", raising=False)
        reset_gateway()
        assert isinstance(get_gateway(), FakeGateway)

    def test_singleton(self):
        assert get_gateway() is get_gateway()

    def test_http_adapter_from_environment(self, monkeypatch):
        monkeypatch.setenv("SHOPPING_GATEWAY", "http")
        monkeypatch.setenv("MARKETPLACE_API_URL", "https://api.duuka.test/")
        monkeypatch.setenv("MARKETPLACE_API_TIMEOUT", "3.5")
        monkeypatch.setenv("MARKETPLACE_API_TOKEN", "secret")
        reset_gateway()

        gateway = get_gateway()

        assert isinstance(gateway, HttpGateway)
        assert gateway.base_url == "https://api.duuka.test"
        assert gateway.timeout == 3.5
        assert gateway.token == "secret"

    def test_unknown_adapter(self, monkeypatch):
        monkeypatch.setenv("SHOPPING_GATEWAY", "carrier-pigeon")
        reset_gateway()
        with pytest.raises(ValueError):
            get_gateway()

    def test_set_gateway_overrides(self, gateway):
        set_gateway(gateway)
        assert get_gateway() is gateway


class TestCatalogLoading:
    def test_delivery_options_from_gateway(self, gateway):
        gateway.delivery_options = (DeliveryOption(id="pickup", name="Self Pickup", fee=0),)
        options = asyncio.run(load_delivery_options(gateway))
        assert [option.id for option in options] == ["pickup"]

    def test_delivery_options_fall_back_when_unavailable(self, gateway):
        gateway.configure(should_succeed=False)
        assert asyncio.run(load_delivery_options(gateway)) == DELIVERY_OPTIONS

    def test_payment_methods_from_gateway(self, gateway):
        gateway.payment_methods = (PaymentMethod.COD,)
        assert asyncio.run(load_payment_methods(gateway)) == (PaymentMethod.COD,)

    def test_payment_methods_fall_back_when_unavailable(self, gateway):
        gateway.configure(should_succeed=False)
        assert asyncio.run(load_payment_methods(gateway)) == PAYMENT_METHODS

    def test_uses_the_active_gateway(self, gateway):
        set_gateway(gateway)
        asyncio.run(load_payment_methods())
        assert gateway.calls == [{"method": "fetch_payment_methods"}]
