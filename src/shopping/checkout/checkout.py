"""Checkout: step-gated state machine from cart to submitted order.

State Machine (6 steps):
    ADDRESS_ENTRY → DELIVERY_SELECTION → PAYMENT_SELECTION → SUBMITTING →
    COMPLETED | FAILED
    DELIVERY_SELECTION → ADDRESS_ENTRY and PAYMENT_SELECTION →
    DELIVERY_SELECTION (going back keeps everything entered so far)

Each forward step is gated on validating the data collected in the step being
left. Validation failures raise ``ValidationError`` keyed by field and leave
the step unchanged. COMPLETED and FAILED are terminal: a new attempt needs a
new Checkout. The SUBMITTING step is what stops a second submission while the
first is in flight.
"""

from enum import Enum

import structlog
from protean.exceptions import ValidationError

from shopping.checkout.address import ADDRESS_FIELDS, Address, address_errors
from shopping.checkout.delivery import DELIVERY_OPTIONS, get_delivery_option, resolve_delivery_fee
from shopping.checkout.payment import PaymentMethod
from shopping.gateway import GatewayError, get_gateway
from shopping.gateway.schemas import OrderItemPayload, OrderSubmission, ShippingAddressPayload
from shopping.shared.phone import Network, get_phone_network, is_valid_uganda_phone

logger = structlog.get_logger(__name__)


class CheckoutStep(Enum):
    ADDRESS_ENTRY = "AddressEntry"
    DELIVERY_SELECTION = "DeliverySelection"
    PAYMENT_SELECTION = "PaymentSelection"
    SUBMITTING = "Submitting"
    COMPLETED = "Completed"
    FAILED = "Failed"


class WrongNetworkError(ValidationError):
    """The mobile number belongs to a different network than the chosen mobile-money method."""


# State machine transition map
_VALID_TRANSITIONS = {
    CheckoutStep.ADDRESS_ENTRY: {CheckoutStep.DELIVERY_SELECTION},
    CheckoutStep.DELIVERY_SELECTION: {CheckoutStep.PAYMENT_SELECTION, CheckoutStep.ADDRESS_ENTRY},
    CheckoutStep.PAYMENT_SELECTION: {CheckoutStep.SUBMITTING, CheckoutStep.DELIVERY_SELECTION},
    CheckoutStep.SUBMITTING: {CheckoutStep.COMPLETED, CheckoutStep.FAILED},
    CheckoutStep.COMPLETED: set(),  # Terminal
    CheckoutStep.FAILED: set(),  # Terminal
}

_PREVIOUS_STEP = {
    CheckoutStep.DELIVERY_SELECTION: CheckoutStep.ADDRESS_ENTRY,
    CheckoutStep.PAYMENT_SELECTION: CheckoutStep.DELIVERY_SELECTION,
}

_NETWORK_NAMES = {Network.MTN: "MTN", Network.AIRTEL: "Airtel"}


class Checkout:
    """One checkout attempt over a cart.

    The cart subtotal is captured when the checkout starts and is what the
    buyer sees at every step; the submitted order is priced from the cart as
    it is at submission time.
    """

    def __init__(self, cart, gateway=None, delivery_options=None, address=None):
        self.cart = cart
        self.gateway = gateway or get_gateway()
        self.delivery_options = tuple(delivery_options or DELIVERY_OPTIONS)
        self.subtotal = cart.subtotal

        self._step = CheckoutStep.ADDRESS_ENTRY
        self._address_draft = {field_name: "" for field_name in ADDRESS_FIELDS}
        self._address = None
        self._selected_delivery = None
        self._delivery_fee = 0
        self._selected_payment = None
        self._mobile_number = ""
        self.order_reference = None
        self.failure_message = None
        self.error = None

        if address:
            self.update_address(**address)

    # -------------------------------------------------------------------
    # Read side
    # -------------------------------------------------------------------
    @property
    def step(self):
        return self._step

    @property
    def is_terminal(self):
        return not _VALID_TRANSITIONS[self._step]

    @property
    def address_draft(self):
        return dict(self._address_draft)

    @property
    def address(self):
        return self._address

    @property
    def selected_delivery(self):
        return self._selected_delivery

    @property
    def delivery_fee(self):
        return self._delivery_fee

    @property
    def selected_payment(self):
        return self._selected_payment

    @property
    def mobile_number(self):
        return self._mobile_number

    @property
    def total(self):
        return self.subtotal + self._delivery_fee

    # -------------------------------------------------------------------
    # State transition helpers
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target):
        if target not in _VALID_TRANSITIONS[self._step]:
            raise ValidationError({"step": [f"Cannot transition from {self._step.value} to {target.value}"]})

    def _assert_step(self, expected, action):
        if self._step != expected:
            raise ValidationError({"step": [f"Cannot {action} during {self._step.value}"]})

    def _transition(self, target):
        self._assert_can_transition(target)
        logger.debug("checkout_step_changed", from_step=self._step.value, to_step=target.value)
        self._step = target

    def back(self):
        """Return to the previous step without validating the current one."""
        previous = _PREVIOUS_STEP.get(self._step)
        if previous is None:
            raise ValidationError({"step": [f"Cannot go back from {self._step.value}"]})
        self._transition(previous)

    # -------------------------------------------------------------------
    # Step 1: address
    # -------------------------------------------------------------------
    def update_address(self, **fields):
        self._assert_step(CheckoutStep.ADDRESS_ENTRY, "edit the address")

        unknown = sorted(set(fields) - set(ADDRESS_FIELDS))
        if unknown:
            raise ValidationError({name: ["Unknown address field"] for name in unknown})

        for field_name, value in fields.items():
            self._address_draft[field_name] = "" if value is None else str(value)

    def confirm_address(self):
        """Validate the address draft and move on to delivery selection."""
        self._assert_can_transition(CheckoutStep.DELIVERY_SELECTION)

        errors = address_errors(self._address_draft)
        if errors:
            raise ValidationError(errors)

        draft = {name: value.strip() for name, value in self._address_draft.items()}
        self._address = Address(
            full_name=draft["full_name"],
            phone=draft["phone"],
            district=draft["district"],
            area=draft["area"],
            street=draft["street"] or None,
            landmark=draft["landmark"] or None,
        )
        if not self._mobile_number:
            self._mobile_number = self._address.phone

        self._transition(CheckoutStep.DELIVERY_SELECTION)

    # -------------------------------------------------------------------
    # Step 2: delivery
    # -------------------------------------------------------------------
    def select_delivery(self, method_id):
        self._assert_step(CheckoutStep.DELIVERY_SELECTION, "select a delivery method")

        if get_delivery_option(method_id, self.delivery_options) is None:
            raise ValidationError({"delivery_method": [f"Unknown delivery method: {method_id}"]})

        self._selected_delivery = method_id
        self._delivery_fee = resolve_delivery_fee(method_id, self.delivery_options)

    def confirm_delivery(self):
        """Lock in the delivery fee and move on to payment selection."""
        self._assert_can_transition(CheckoutStep.PAYMENT_SELECTION)

        if self._selected_delivery is None:
            raise ValidationError({"delivery_method": ["Please select a delivery method"]})

        self._delivery_fee = resolve_delivery_fee(self._selected_delivery, self.delivery_options)
        self._transition(CheckoutStep.PAYMENT_SELECTION)

    # -------------------------------------------------------------------
    # Step 3: payment
    # -------------------------------------------------------------------
    def select_payment(self, method, mobile_number=None):
        self._assert_step(CheckoutStep.PAYMENT_SELECTION, "select a payment method")

        try:
            self._selected_payment = PaymentMethod(method)
        except ValueError as exc:
            raise ValidationError({"payment_method": [f"Unknown payment method: {method}"]}) from exc

        if mobile_number is not None:
            self._mobile_number = mobile_number

    def set_mobile_number(self, mobile_number):
        self._assert_step(CheckoutStep.PAYMENT_SELECTION, "change the mobile number")
        self._mobile_number = mobile_number or ""

    def validate_payment(self):
        """Raise if the payment selection cannot be submitted."""
        method = self._selected_payment
        if method is None:
            raise ValidationError({"payment_method": ["Please select a payment method"]})

        if not method.is_mobile_money:
            return

        if not self._mobile_number or not is_valid_uganda_phone(self._mobile_number):
            raise ValidationError({"mobile_number": ["Please enter a valid mobile money number"]})

        if get_phone_network(self._mobile_number) != method.network:
            raise WrongNetworkError(
                {"mobile_number": [f"Please enter an {_NETWORK_NAMES[method.network]} number for {method.label}"]}
            )

    # -------------------------------------------------------------------
    # Step 4: submission
    # -------------------------------------------------------------------
    def build_order_payload(self):
        """The order as it will be submitted, priced from the cart right now."""
        if self._address is None or self._selected_delivery is None or self._selected_payment is None:
            raise ValidationError({"step": ["Address, delivery and payment must be chosen first"]})

        subtotal = self.cart.subtotal
        address = self._address
        return OrderSubmission(
            items=[
                OrderItemPayload(product=item.product_id, quantity=item.quantity, price=item.price)
                for item in self.cart.items
            ],
            shipping_address=ShippingAddressPayload(
                full_name=address.full_name,
                phone=address.phone,
                district=address.district,
                area=address.area,
                street=address.street or "",
                landmark=address.landmark or "",
            ),
            delivery_method=self._selected_delivery,
            delivery_fee=self._delivery_fee,
            payment_method=self._selected_payment.value,
            mobile_number=self._mobile_number if self._selected_payment.is_mobile_money else None,
            subtotal=subtotal,
            total=subtotal + self._delivery_fee,
        )

    async def place_order(self):
        """Submit the order.

        Validation problems raise and keep the buyer on the payment step.
        Gateway failures end the attempt in FAILED with ``failure_message``
        set and the cart untouched; success clears the cart and ends in
        COMPLETED with ``order_reference`` set.
        """
        self._assert_can_transition(CheckoutStep.SUBMITTING)
        self.validate_payment()
        if self.cart.is_empty:
            raise ValidationError({"cart": ["No items to checkout"]})

        submission = self.build_order_payload()
        self._transition(CheckoutStep.SUBMITTING)

        try:
            reference = await self.gateway.complete_checkout(submission)
        except GatewayError as exc:
            self._fail(exc)
            return None
        except Exception:
            logger.exception("checkout_submission_error")
            self._fail(GatewayError())
            return None

        self.cart.clear()
        await self.cart.flush()

        self.order_reference = reference
        self._transition(CheckoutStep.COMPLETED)
        logger.info(
            "checkout_completed",
            order_id=reference.id,
            order_number=reference.order_number,
            total=submission.total,
        )
        return reference

    def _fail(self, exc):
        self.failure_message = exc.message
        self.error = exc.to_dict()
        self._transition(CheckoutStep.FAILED)
        logger.warning("checkout_failed", message=exc.message, status_code=exc.status_code)
