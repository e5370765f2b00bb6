"""Bookable resource data models: vehicles, drivers and their schedules.

Field aliases follow the backend's wire names (``_id``, ``startTime``,
``blackoutPeriods``, ``rent``, ``baseDailyRate`` ...) so directory records can
be validated as-is, while Python code uses snake_case names.
"""

import json
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from carrental.config import settings
from carrental.utils import WEEKDAYS, to_minutes

HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

_WEEKDAY_LOOKUP = {name.lower(): name for name in WEEKDAYS}


def _coerce_instant(value: Any, end_of_day: bool) -> Any:
    """Turn a date, datetime or ISO string into a naive datetime.

    Date-only values become midnight, or the last instant of the day when
    ``end_of_day`` is set. Aware datetimes keep their wall-clock fields.
    """
    boundary = time.max if end_of_day else time.min
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime.combine(value, boundary)
    if isinstance(value, str):
        text = value.strip()
        if len(text) == 10:
            return datetime.combine(date.fromisoformat(text), boundary)
        return datetime.fromisoformat(text.replace("Z", "+00:00")).replace(tzinfo=None)
    return value


class WeeklyAvailability(BaseModel):
    """Recurring weekly schedule bounded by one daily time-of-day window."""

    model_config = ConfigDict(populate_by_name=True)

    days: list[str] = Field(default_factory=list)
    start_time: str = Field(
        default_factory=lambda: settings.availability.default_start_time,
        alias="startTime",
        pattern=HHMM_PATTERN,
    )
    end_time: str = Field(
        default_factory=lambda: settings.availability.default_end_time,
        alias="endTime",
        pattern=HHMM_PATTERN,
    )

    @field_validator("days")
    @classmethod
    def _canonical_days(cls, value: list[str]) -> list[str]:
        canonical = []
        for day in value:
            name = _WEEKDAY_LOOKUP.get(day.strip().lower())
            if name is None:
                raise ValueError(f"Unknown weekday: {day!r}")
            if name not in canonical:
                canonical.append(name)
        return canonical

    @model_validator(mode="after")
    def _no_overnight_window(self) -> "WeeklyAvailability":
        if to_minutes(self.start_time) > to_minutes(self.end_time):
            raise ValueError(
                f"Overnight availability windows are not supported "
                f"({self.start_time}-{self.end_time})"
            )
        return self


class BlackoutPeriod(BaseModel):
    """Absolute interval during which a resource cannot be booked."""

    model_config = ConfigDict(populate_by_name=True)

    from_: datetime = Field(alias="from")
    to: datetime

    @field_validator("from_", mode="before")
    @classmethod
    def _start_instant(cls, value: Any) -> Any:
        return _coerce_instant(value, end_of_day=False)

    @field_validator("to", mode="before")
    @classmethod
    def _end_instant(cls, value: Any) -> Any:
        return _coerce_instant(value, end_of_day=True)

    @model_validator(mode="after")
    def _ordered(self) -> "BlackoutPeriod":
        if self.from_ > self.to:
            raise ValueError(f"Blackout period ends before it starts: {self.from_} > {self.to}")
        return self


class BookableResource(BaseModel):
    """Availability contract shared by vehicles and drivers."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    company_id: Optional[str] = Field(default=None, alias="company")
    availability: Optional[WeeklyAvailability] = None
    blackout_periods: list[BlackoutPeriod] = Field(
        default_factory=list, alias="blackoutPeriods"
    )

    @model_validator(mode="before")
    @classmethod
    def _merge_blackout_dates(cls, data: Any) -> Any:
        """Fold legacy ``blackoutDates`` into full-day periods.

        Entries may be dates or full timestamps; only the calendar date is kept.
        """
        if not isinstance(data, dict) or "blackoutDates" not in data:
            return data
        data = dict(data)
        dates = data.pop("blackoutDates") or []
        periods = list(data.get("blackoutPeriods") or data.get("blackout_periods") or [])
        for value in dates:
            if not value:
                continue
            instant = _coerce_instant(value, end_of_day=False)
            if not isinstance(instant, datetime):
                raise ValueError(f"Invalid blackout date: {value!r}")
            periods.append({"from": instant.date(), "to": instant.date()})
        data.pop("blackout_periods", None)
        data["blackoutPeriods"] = periods
        return data

    @field_validator("company_id", mode="before")
    @classmethod
    def _company_ref(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return value.get("_id")
        return value

    @field_validator("availability", mode="before")
    @classmethod
    def _decode_availability(cls, value: Any) -> Any:
        # Multipart form uploads store availability as a JSON string.
        if isinstance(value, str):
            return json.loads(value) if value.strip() else None
        return value

    @property
    def has_schedule(self) -> bool:
        """True when a weekly schedule with at least one day is configured."""
        return self.availability is not None and bool(self.availability.days)


class Vehicle(BookableResource):
    """A rental vehicle charged per booked day."""

    daily_rate: Decimal = Field(alias="rent", ge=0)
    manufacturer: str = ""
    model: str = ""
    number_plate: str = Field(default="", alias="numberPlate")


class Driver(BookableResource):
    """A driver charged per booked day and per booked hour."""

    name: str = ""
    daily_rate: Decimal = Field(alias="baseDailyRate", ge=0)
    hourly_rate: Decimal = Field(alias="baseHourlyRate", ge=0)
