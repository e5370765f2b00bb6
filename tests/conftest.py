"""Shared test fixtures and helpers."""

from datetime import date
from typing import Any, Optional

import pytest

from carrental.checkout.booking_form import BookingForm
from carrental.checkout.state_machine import CheckoutStateMachine
from carrental.schemas.booking_schema import BookingRequest
from carrental.schemas.resource_schema import Driver, Vehicle
from carrental.tools import booking, directory, payment

WEEKDAYS_ONLY = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]


@pytest.fixture(autouse=True)
def _reset_tools():
    booking.reset()
    payment.reset()
    directory.reset()
    yield
    booking.reset()
    payment.reset()
    directory.reset()


@pytest.fixture
def state_machine():
    return CheckoutStateMachine()


@pytest.fixture
def booking_form():
    return BookingForm()


def make_vehicle(
    vehicle_id: str = "veh-1",
    rent: Any = 3000,
    days: Optional[list[str]] = None,
    start: str = "08:00",
    end: str = "20:00",
    blackouts: Optional[list[dict]] = None,
    company: str = "co-1",
    with_schedule: bool = True,
) -> Vehicle:
    """Helper to create a Vehicle from wire-shaped data."""
    raw: dict[str, Any] = {"_id": vehicle_id, "rent": rent, "company": {"_id": company}}
    if with_schedule:
        raw["availability"] = {
            "days": WEEKDAYS_ONLY if days is None else days,
            "startTime": start,
            "endTime": end,
        }
    if blackouts:
        raw["blackoutPeriods"] = blackouts
    return Vehicle.model_validate(raw)


def make_driver(
    driver_id: str = "drv-1",
    daily: Any = 2000,
    hourly: Any = 150,
    days: Optional[list[str]] = None,
    start: str = "00:00",
    end: str = "23:59",
    blackouts: Optional[list[dict]] = None,
    company: str = "co-1",
    with_schedule: bool = True,
) -> Driver:
    """Helper to create a Driver from wire-shaped data."""
    raw: dict[str, Any] = {
        "_id": driver_id,
        "name": driver_id.title(),
        "company": company,
        "baseDailyRate": daily,
        "baseHourlyRate": hourly,
    }
    if with_schedule:
        raw["availability"] = {
            "days": WEEKDAYS_ONLY if days is None else days,
            "startTime": start,
            "endTime": end,
        }
    if blackouts:
        raw["blackoutPeriods"] = blackouts
    return Driver.model_validate(raw)


def make_request(
    from_date: str = "2024-06-10",
    to_date: Optional[str] = None,
    from_time: str = "10:00",
    to_time: str = "14:00",
    driver_id: Optional[str] = None,
) -> BookingRequest:
    """Helper to create a BookingRequest; 2024-06-10 is a Monday."""
    return BookingRequest(
        from_date=date.fromisoformat(from_date),
        to_date=date.fromisoformat(to_date or from_date),
        from_time=from_time,
        to_time=to_time,
        selected_driver_id=driver_id,
    )
