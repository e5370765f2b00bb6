"""
Mock payment processor.

In production, this is the backend's Stripe integration
(``/stripe/create-payment-intent`` and ``/stripe/confirm-payment``); the
card entry itself happens in the third-party payment sheet.
"""

import logging
import uuid
from decimal import Decimal
from enum import Enum
from typing import Optional, TypedDict

logger = logging.getLogger(__name__)


class PaymentStatus(str, Enum):
    """Result reported by the payment sheet."""

    SUCCEEDED = "succeeded"
    CANCELED = "canceled"
    FAILED = "failed"


class PaymentIntent(TypedDict):
    """A payment intent awaiting confirmation."""

    id: str
    client_secret: str
    booking_id: str
    amount: str
    currency: str
    status: str


class PaymentResult(TypedDict, total=False):
    """Result from create_payment_intent or confirm_payment."""

    success: bool
    message: str
    intent_id: str
    client_secret: str

_intents: dict[str, PaymentIntent] = {}


def create_payment_intent(booking_id: str, amount: Decimal, currency: str) -> PaymentResult:
    """Create a payment intent for a pending booking."""
    if amount <= 0:
        return {"success": False, "message": "Payment setup failed - amount must be positive."}

    intent_id = f"pi_{uuid.uuid4().hex[:16]}"
    secret = f"{intent_id}_secret_{uuid.uuid4().hex[:12]}"
    _intents[intent_id] = {
        "id": intent_id,
        "client_secret": secret,
        "booking_id": booking_id,
        "amount": str(amount),
        "currency": currency,
        "status": "requires_payment_method",
    }
    logger.info("Payment intent %s created for booking %s: %s %s", intent_id, booking_id, amount, currency)
    return {"success": True, "intent_id": intent_id, "client_secret": secret, "message": "Payment intent created."}


def confirm_payment(intent_id: str, booking_id: str, user_id: str) -> PaymentResult:
    """Record a succeeded payment on the backend."""
    intent = _intents.get(intent_id)
    if intent is None:
        return {"success": False, "message": f"Payment intent {intent_id} not found."}
    if intent["booking_id"] != booking_id:
        return {"success": False, "message": f"Payment intent {intent_id} does not belong to booking {booking_id}."}
    intent["status"] = PaymentStatus.SUCCEEDED.value
    logger.info("Payment %s confirmed for booking %s by user %s", intent_id, booking_id, user_id)
    return {"success": True, "intent_id": intent_id, "message": "Payment confirmed."}


def get_intent(intent_id: str) -> Optional[PaymentIntent]:
    """Retrieve a payment intent by id."""
    return _intents.get(intent_id)


def reset() -> None:
    """Clear all payment intents. Used by test fixtures for isolation."""
    _intents.clear()
