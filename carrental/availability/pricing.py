"""
Price computation for admissible bookings.

Partial days and hours are billed as whole units (rounded up). A booking
always costs at least one vehicle day; driver hours are not clamped, so a
zero-length single-day booking bills zero driver hours.

Driver cost is ``daily_rate * days + hourly_rate * hours``. Both components
are always charged together.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from carrental.config import settings
from carrental.schemas.booking_schema import BookingRequest, PriceBreakdown
from carrental.schemas.resource_schema import Driver, Vehicle
from carrental.utils import MINUTES_PER_HOUR, to_minutes

logger = logging.getLogger(__name__)

MIN_BOOKED_DAYS = 1


def _ceil_div(numerator: int, denominator: int) -> int:
    return -(-numerator // denominator)


def booked_days(request: BookingRequest) -> int:
    """Whole calendar days between the dates, never less than one."""
    return max(MIN_BOOKED_DAYS, (request.to_date - request.from_date).days)


def booked_hours(request: BookingRequest) -> int:
    """Hours covered by the booking, rounded up.

    Multi-day bookings count the hours across the entire span, not only the
    boundary days.
    """
    if request.is_single_day:
        minutes = to_minutes(request.to_time) - to_minutes(request.from_time)
    else:
        delta = request.end_instant - request.start_instant
        minutes = int(delta.total_seconds()) // 60
    return _ceil_div(minutes, MINUTES_PER_HOUR)


def check_driver_selection(request: BookingRequest, driver: Optional[Driver]) -> None:
    """Ensure ``driver`` is the one ``request.selected_driver_id`` books.

    Raises:
        ValueError: If a driver is passed without being selected, or the
            selected driver is missing or a different one.
    """
    selected = request.selected_driver_id
    driver_id = driver.id if driver is not None else None
    if selected != driver_id:
        raise ValueError(
            f"Driver {driver_id!r} does not match the selected driver {selected!r}"
        )


def quantize_amount(amount: Decimal, places: Optional[int] = None) -> Decimal:
    """Round a currency amount half-up to the configured decimal places."""
    if places is None:
        places = settings.pricing.amount_decimal_places
    return amount.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def compute_price(
    vehicle: Vehicle,
    request: BookingRequest,
    driver: Optional[Driver] = None,
    currency: Optional[str] = None,
) -> PriceBreakdown:
    """
    Compute the cost breakdown for a validated booking request.

    Args:
        vehicle: The rented vehicle.
        request: The requested interval; admissibility is the caller's concern.
        driver: The driver named by ``request.selected_driver_id``, if any.
        currency: Currency code for the breakdown (defaults to config).

    Returns:
        PriceBreakdown with days, hours and per-resource amounts.

    Raises:
        ValueError: If ``driver`` does not match the selected driver.
    """
    check_driver_selection(request, driver)
    days = booked_days(request)
    hours = booked_hours(request)

    vehicle_amount = vehicle.daily_rate * days
    driver_amount = Decimal("0")
    if driver is not None:
        driver_amount = driver.daily_rate * days + driver.hourly_rate * hours

    breakdown = PriceBreakdown(
        booked_days=days,
        booked_hours=hours,
        vehicle_amount=quantize_amount(vehicle_amount),
        driver_amount=quantize_amount(driver_amount),
        total_amount=quantize_amount(vehicle_amount + driver_amount),
        currency=currency or settings.pricing.currency,
    )
    logger.debug(
        "Priced vehicle %s: %d day(s), %d hour(s), total %s %s",
        vehicle.id, days, hours, breakdown.total_amount, breakdown.currency,
    )
    return breakdown
