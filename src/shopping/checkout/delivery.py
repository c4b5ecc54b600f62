"""Delivery options and the delivery fee resolver.

The catalog below is the fixed set of delivery methods the marketplace
offers. Fees are whole shillings.
"""

from protean.fields import Integer, String

from shopping.domain import shopping


@shopping.value_object
class DeliveryOption:
    id = String(required=True, max_length=50)
    name = String(required=True, max_length=100)
    fee = Integer(min_value=0, default=0)
    estimated_time = String(max_length=100)
    description = String(max_length=255)


DELIVERY_OPTIONS = (
    DeliveryOption(
        id="safeboda",
        name="SafeBoda",
        fee=5000,
        estimated_time="30-60 mins",
        description="Fast delivery via SafeBoda rider",
    ),
    DeliveryOption(
        id="faras",
        name="Faras",
        fee=8000,
        estimated_time="1-2 hours",
        description="Standard delivery via Faras",
    ),
    DeliveryOption(
        id="personal",
        name="Personal Delivery",
        fee=3000,
        estimated_time="1-3 hours",
        description="Seller delivers personally",
    ),
    DeliveryOption(
        id="pickup",
        name="Self Pickup",
        fee=0,
        estimated_time="Your convenience",
        description="Pick up from seller location",
    ),
)


def get_delivery_option(method_id, options=DELIVERY_OPTIONS):
    return next((option for option in options if option.id == method_id), None)


def resolve_delivery_fee(method_id, options=DELIVERY_OPTIONS) -> int:
    """Fee for a delivery method.

    Unknown or missing methods resolve to 0: no fee is known yet.
    """
    option = get_delivery_option(method_id, options)
    return option.fee if option is not None else 0


def delivery_options_from_response(data):
    """Build delivery options from a ``GET /api/delivery/options`` body.

    Only methods the marketplace knows about and reports as available are
    kept, in catalog order. Returns the static catalog when none qualify.
    """
    methods = (data or {}).get("deliveryMethods") or {}
    options = []
    for default in DELIVERY_OPTIONS:
        config = methods.get(default.id)
        if not config or not config.get("available"):
            continue
        fee = config.get("fee", config.get("baseFee"))
        options.append(
            DeliveryOption(
                id=default.id,
                name=default.name,
                fee=default.fee if fee is None else fee,
                estimated_time=config.get("estimatedTime") or default.estimated_time,
                description=config.get("description") or default.description,
            )
        )
    return tuple(options) if options else DELIVERY_OPTIONS
