"""
Booking admissibility for vehicles and drivers.

A requested interval is admissible for a resource only if it overlaps none of
the resource's blackout periods, every calendar day it touches is one of the
resource's available weekdays, and both the pick-up and drop-off times fall
inside the resource's daily window.

Inadmissibility is a normal outcome, reported as an ``Admissibility`` value
carrying the failed rule, never as an exception.

Usage:
    result = evaluate_resource(vehicle, request)
    if not result:
        show_error(result.message)
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Iterable, Optional, TypeVar

from carrental.schemas.booking_schema import BookingRequest
from carrental.schemas.resource_schema import (
    BlackoutPeriod,
    BookableResource,
    WeeklyAvailability,
)
from carrental.utils import day_of_week, format_date, iter_days, time_in_range

logger = logging.getLogger(__name__)

ResourceT = TypeVar("ResourceT", bound=BookableResource)


class UnavailableReason(str, Enum):
    """Which admissibility rule rejected the request."""
    BLACKOUT_CONFLICT = "blackout conflict"
    DAY_UNAVAILABLE = "day unavailable"
    TIME_OUT_OF_RANGE = "time out of range"


@dataclass(frozen=True)
class Admissibility:
    """Outcome of checking one resource against one requested interval."""
    admissible: bool
    reason: Optional[UnavailableReason] = None
    message: str = ""
    conflict: Optional[BlackoutPeriod] = None
    day: Optional[date] = None

    def __bool__(self) -> bool:
        return self.admissible

    @classmethod
    def available(cls) -> "Admissibility":
        return cls(admissible=True, message="Available for the requested dates.")


def overlaps(start: datetime, end: datetime, period: BlackoutPeriod) -> bool:
    """Four-way overlap test between a requested interval and a blackout.

    Boundaries are inclusive: touching a blackout counts as a conflict.
    """
    starts_inside = period.from_ <= start <= period.to
    ends_inside = period.from_ <= end <= period.to
    encloses_blackout = start <= period.from_ and end >= period.to
    inside_blackout = period.from_ <= start and end <= period.to
    return starts_inside or ends_inside or encloses_blackout or inside_blackout


def find_blackout_conflict(
    resource: BookableResource, start: datetime, end: datetime
) -> Optional[BlackoutPeriod]:
    """Return the first blackout period (in input order) overlapping the interval."""
    for period in resource.blackout_periods:
        if overlaps(start, end, period):
            return period
    return None


def check_weekly_availability(
    availability: Optional[WeeklyAvailability], request: BookingRequest
) -> Admissibility:
    """
    Walk every day of the request and check it against the weekly schedule.

    A missing schedule, or one without any days, never rejects a booking.
    The first day must contain the pick-up time and the last day the
    drop-off time; a single-day booking checks both on the same day.
    """
    if availability is None or not availability.days:
        return Admissibility.available()

    window = f"{availability.start_time}-{availability.end_time}"
    for day in iter_days(request.from_date, request.to_date):
        weekday = day_of_week(day)
        if weekday not in availability.days:
            return Admissibility(
                admissible=False,
                reason=UnavailableReason.DAY_UNAVAILABLE,
                message=f"Not available on {weekday} {format_date(day)}.",
                day=day,
            )
        if day == request.from_date and not time_in_range(
            request.from_time, availability.start_time, availability.end_time
        ):
            return Admissibility(
                admissible=False,
                reason=UnavailableReason.TIME_OUT_OF_RANGE,
                message=(
                    f"Pick-up time {request.from_time} on {format_date(day)} "
                    f"is outside available hours {window}."
                ),
                day=day,
            )
        if day == request.to_date and not time_in_range(
            request.to_time, availability.start_time, availability.end_time
        ):
            return Admissibility(
                admissible=False,
                reason=UnavailableReason.TIME_OUT_OF_RANGE,
                message=(
                    f"Drop-off time {request.to_time} on {format_date(day)} "
                    f"is outside available hours {window}."
                ),
                day=day,
            )
    return Admissibility.available()


def evaluate_resource(resource: BookableResource, request: BookingRequest) -> Admissibility:
    """Decide whether ``resource`` can be booked for ``request``.

    Blackout periods are checked first and override the weekly schedule.
    ``BookingRequest`` guarantees the interval is not inverted.
    """
    conflict = find_blackout_conflict(resource, request.start_instant, request.end_instant)
    if conflict is not None:
        logger.debug("Resource %s blocked by blackout %s - %s", resource.id, conflict.from_, conflict.to)
        return Admissibility(
            admissible=False,
            reason=UnavailableReason.BLACKOUT_CONFLICT,
            message=(
                f"Unavailable from {conflict.from_:%Y-%m-%d %H:%M} "
                f"to {conflict.to:%Y-%m-%d %H:%M}."
            ),
            conflict=conflict,
        )

    result = check_weekly_availability(resource.availability, request)
    if not result:
        logger.debug("Resource %s rejected: %s", resource.id, result.reason.value)
    return result


def filter_available(
    candidates: Iterable[ResourceT], request: BookingRequest
) -> list[ResourceT]:
    """Return the admissible candidates, preserving their input order."""
    return [c for c in candidates if evaluate_resource(c, request)]
