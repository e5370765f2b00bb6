from carrental.checkout.booking_form import BookingForm, FieldStatus
from carrental.checkout.flow import CheckoutFlow, CheckoutOutcome, Quote
from carrental.checkout.state_machine import (
    CheckoutState,
    CheckoutStateMachine,
    CheckoutTrigger,
    InvalidTransitionError,
)

__all__ = [
    "BookingForm",
    "FieldStatus",
    "CheckoutFlow",
    "CheckoutOutcome",
    "Quote",
    "CheckoutState",
    "CheckoutStateMachine",
    "CheckoutTrigger",
    "InvalidTransitionError",
]
