"""
Mock booking submission API.

In production, this is the rental backend's ``/bookings`` endpoints; the
backend owns persistence and re-validates availability server-side.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, TypedDict

from carrental.schemas.booking_schema import BookingPayload

logger = logging.getLogger(__name__)


class BookingRecord(TypedDict):
    """Full booking record stored by the backend."""

    _id: str
    vehicleId: str
    userId: str
    companyId: Optional[str]
    driverId: Optional[str]
    fromDate: str
    toDate: str
    fromTime: str
    toTime: str
    intercity: bool
    cityName: str
    totalAmount: float
    status: str
    createdAt: str


class BookingResult(TypedDict, total=False):
    """Result from create_booking, confirm_booking, or delete_booking."""

    success: bool
    message: str
    booking_id: str
    details: BookingRecord

_bookings: dict[str, BookingRecord] = {}


def create_booking(payload: BookingPayload) -> BookingResult:
    """Create a booking from a submission payload and return the stored record."""
    if payload.total_amount <= 0:
        return {
            "success": False,
            "message": "Cannot create booking - total amount must be positive.",
        }

    booking_id = uuid.uuid4().hex[:24]
    record = {
        "_id": booking_id,
        **payload.to_api(),
        "createdAt": datetime.now(timezone.utc).isoformat(),
    }

    _bookings[booking_id] = record
    logger.info(
        "Booking created: %s for vehicle %s (%s %s to %s %s), status %s",
        booking_id, payload.vehicle_id, record["fromDate"], record["fromTime"],
        record["toDate"], record["toTime"], record["status"],
    )

    return {
        "success": True,
        "booking_id": booking_id,
        "message": f"Booking {booking_id} created.",
        "details": record,
    }


def confirm_booking(booking_id: str) -> BookingResult:
    """Mark a pending booking as confirmed after payment."""
    if booking_id not in _bookings:
        return {"success": False, "message": f"Booking {booking_id} not found."}
    _bookings[booking_id]["status"] = "confirmed"
    logger.info("Booking confirmed: %s", booking_id)
    return {
        "success": True,
        "booking_id": booking_id,
        "message": f"Booking {booking_id} confirmed.",
        "details": _bookings[booking_id],
    }


def delete_booking(booking_id: str) -> BookingResult:
    """Delete a booking, e.g. a pending one whose payment was cancelled."""
    if booking_id not in _bookings:
        return {"success": False, "message": f"Booking {booking_id} not found."}
    del _bookings[booking_id]
    logger.info("Booking deleted: %s", booking_id)
    return {"success": True, "message": f"Booking {booking_id} has been deleted."}


def get_booking(booking_id: str) -> Optional[BookingRecord]:
    """Retrieve a booking by id."""
    return _bookings.get(booking_id)


def reset() -> None:
    """Clear all bookings. Used by test fixtures for isolation."""
    _bookings.clear()
