"""Payment methods and the mobile-money network rules."""

from enum import Enum

from shopping.shared.phone import Network


class PaymentMethod(Enum):
    MTN_MONEY = "mtn_money"
    AIRTEL_MONEY = "airtel_money"
    CARD = "card"
    COD = "cod"

    @property
    def label(self):
        return _LABELS[self]

    @property
    def network(self):
        """The telecom network a mobile-money method is bound to, else None."""
        return _MOBILE_MONEY_NETWORKS.get(self)

    @property
    def is_mobile_money(self):
        return self in _MOBILE_MONEY_NETWORKS


_LABELS = {
    PaymentMethod.MTN_MONEY: "MTN Mobile Money",
    PaymentMethod.AIRTEL_MONEY: "Airtel Money",
    PaymentMethod.CARD: "Card Payment",
    PaymentMethod.COD: "Cash on Delivery",
}

_MOBILE_MONEY_NETWORKS = {
    PaymentMethod.MTN_MONEY: Network.MTN,
    PaymentMethod.AIRTEL_MONEY: Network.AIRTEL,
}

# Marketplace API catalog ids -> checkout payment methods
_API_METHOD_IDS = {
    "mtn_mobile_money": PaymentMethod.MTN_MONEY,
    "mtn_money": PaymentMethod.MTN_MONEY,
    "airtel_money": PaymentMethod.AIRTEL_MONEY,
    "visa": PaymentMethod.CARD,
    "mastercard": PaymentMethod.CARD,
    "card": PaymentMethod.CARD,
    "cash_on_delivery": PaymentMethod.COD,
    "cod": PaymentMethod.COD,
}

PAYMENT_METHODS = tuple(PaymentMethod)


def payment_methods_from_response(data):
    """Build the payment method list from a ``GET /api/payments/methods`` body.

    The marketplace groups its methods by kind (``mobile_money``, ``card``,
    ``cod``...). Methods the checkout cannot take are skipped; when nothing is
    recognised the full static set is returned.
    """
    groups = (data or {}).get("paymentMethods") or {}
    found = set()
    for entries in groups.values():
        for entry in entries or []:
            method = _API_METHOD_IDS.get(entry.get("id"))
            if method is not None:
                found.add(method)
    if not found:
        return PAYMENT_METHODS
    return tuple(method for method in PaymentMethod if method in found)
