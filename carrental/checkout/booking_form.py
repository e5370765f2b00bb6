"""
Booking form state with per-field validation.

Raw date/time input is validated and normalized here, before it reaches the
evaluator, which assumes well-formed ``YYYY-MM-DD`` and ``HH:MM`` values.

Usage:
    form = BookingForm()
    ok, msg = form.set_field("from_date", "2024-06-10")
    if form.is_complete():
        request = form.to_request()
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, Optional

from carrental.schemas.booking_schema import BookingRequest
from carrental.utils import format_date, format_time, to_minutes

logger = logging.getLogger(__name__)


class FieldStatus(str, Enum):
    """Lifecycle status of a form field."""

    EMPTY = "empty"
    INVALID = "invalid"
    VALID = "valid"


def _parse_date(value: str) -> Optional[str]:
    try:
        return format_date(datetime.strptime(value.strip(), "%Y-%m-%d"))
    except ValueError:
        return None


def _parse_time(value: str) -> Optional[str]:
    try:
        return format_time(datetime.strptime(value.strip(), "%H:%M"))
    except ValueError:
        return None


def _parse_text(value: str) -> Optional[str]:
    return value.strip()


@dataclass(frozen=True)
class FieldDefinition:
    """Schema for a single form field."""

    name: str
    display_name: str
    parser: Callable[[str], Optional[str]]
    required: bool = True


@dataclass
class FieldValue:
    """Current state and history of a form field."""

    raw_value: Optional[str] = None
    value: Optional[str] = None
    status: FieldStatus = FieldStatus.EMPTY
    attempts: int = 0
    history: list[str] = field(default_factory=list)


class BookingForm:
    """
    Collects the booking interval, driver choice and trip details.

    ``to_request`` refuses to build a request until every required field is
    valid and the interval is not inverted.
    """

    FIELD_DEFINITIONS: list[FieldDefinition] = [
        FieldDefinition(name="from_date", display_name="pick-up date", parser=_parse_date),
        FieldDefinition(name="to_date", display_name="drop-off date", parser=_parse_date),
        FieldDefinition(name="from_time", display_name="pick-up time", parser=_parse_time),
        FieldDefinition(name="to_time", display_name="drop-off time", parser=_parse_time),
        FieldDefinition(
            name="city_name", display_name="city", parser=_parse_text, required=False
        ),
    ]

    def __init__(self) -> None:
        self.fields: dict[str, FieldValue] = {
            defn.name: FieldValue() for defn in self.FIELD_DEFINITIONS
        }
        self.driver_id: Optional[str] = None
        self.intercity: bool = False

    def _get_definition(self, name: str) -> FieldDefinition:
        for defn in self.FIELD_DEFINITIONS:
            if defn.name == name:
                return defn
        raise ValueError(f"Unknown field: {name}")

    def set_field(self, name: str, raw_value: str) -> tuple[bool, str]:
        """
        Set a field value with validation.

        Returns:
            (success, message) - success=True if validation passed.
        """
        defn = self._get_definition(name)
        slot = self.fields[name]
        if slot.raw_value is not None:
            slot.history.append(slot.raw_value)
        slot.raw_value = raw_value
        slot.attempts += 1

        parsed = defn.parser(raw_value)
        if parsed is None:
            slot.status = FieldStatus.INVALID
            slot.value = None
            logger.debug("Field '%s' validation failed: '%s'", name, raw_value)
            return False, f"The {defn.display_name} '{raw_value}' doesn't look right."

        slot.value = parsed
        slot.status = FieldStatus.VALID
        logger.debug("Field '%s' set to '%s'", name, parsed)
        return True, f"Got {defn.display_name}: {parsed}"

    def set_dates(self, from_value: date, to_value: date) -> None:
        """Set both dates from picker values (time-of-day is ignored)."""
        self.set_field("from_date", format_date(from_value))
        self.set_field("to_date", format_date(to_value))

    def toggle_driver(self, driver_id: str) -> Optional[str]:
        """Select a driver, or deselect it when it is already selected."""
        self.driver_id = None if self.driver_id == driver_id else driver_id
        return self.driver_id

    def set_intercity(self, intercity: bool) -> None:
        self.intercity = intercity

    def get_value(self, name: str) -> Optional[str]:
        """Get the normalized value of a field."""
        return self.fields[name].value

    def missing_fields(self) -> list[FieldDefinition]:
        """Required fields that are empty or invalid."""
        return [
            defn
            for defn in self.FIELD_DEFINITIONS
            if defn.required and self.fields[defn.name].status != FieldStatus.VALID
        ]

    def is_complete(self) -> bool:
        return not self.missing_fields()

    def to_dict(self) -> dict[str, Any]:
        """Export valid field values plus driver and intercity choices."""
        data: dict[str, Any] = {
            d.name: self.fields[d.name].value
            for d in self.FIELD_DEFINITIONS
            if self.fields[d.name].value is not None
        }
        data["driver_id"] = self.driver_id
        data["intercity"] = self.intercity
        return data

    def to_request(self) -> BookingRequest:
        """
        Build a BookingRequest from the collected fields.

        Raises:
            ValueError: If fields are missing or the interval is inverted.
        """
        missing = self.missing_fields()
        if missing:
            names = ", ".join(d.display_name for d in missing)
            raise ValueError(f"Missing or invalid: {names}")

        from_date = date.fromisoformat(self.get_value("from_date"))
        to_date = date.fromisoformat(self.get_value("to_date"))
        from_time = self.get_value("from_time")
        to_time = self.get_value("to_time")

        if to_date < from_date:
            raise ValueError("Drop-off date cannot be before pick-up date")
        if from_date == to_date and to_minutes(to_time) < to_minutes(from_time):
            raise ValueError("Drop-off time cannot be before pick-up time on the same day")

        return BookingRequest(
            from_date=from_date,
            to_date=to_date,
            from_time=from_time,
            to_time=to_time,
            selected_driver_id=self.driver_id,
        )
