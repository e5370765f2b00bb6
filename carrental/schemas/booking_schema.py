"""Booking request, price breakdown and submission payload models."""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, model_validator

from carrental.schemas.resource_schema import HHMM_PATTERN
from carrental.utils import combine, to_minutes


class BookingRequest(BaseModel):
    """Requested rental interval, built transiently from validated user input."""

    model_config = ConfigDict(frozen=True)

    from_date: date
    to_date: date
    from_time: str = Field(pattern=HHMM_PATTERN)
    to_time: str = Field(pattern=HHMM_PATTERN)
    selected_driver_id: Optional[str] = None

    @model_validator(mode="after")
    def _not_inverted(self) -> "BookingRequest":
        if self.to_date < self.from_date:
            raise ValueError(
                f"Drop-off date {self.to_date} is before pick-up date {self.from_date}"
            )
        if self.is_single_day and to_minutes(self.to_time) < to_minutes(self.from_time):
            raise ValueError(
                f"Drop-off time {self.to_time} is before pick-up time {self.from_time}"
            )
        return self

    @property
    def start_instant(self) -> datetime:
        return combine(self.from_date, self.from_time)

    @property
    def end_instant(self) -> datetime:
        return combine(self.to_date, self.to_time)

    @property
    def is_single_day(self) -> bool:
        return self.from_date == self.to_date


class PriceBreakdown(BaseModel):
    """Deterministic cost breakdown for an admissible booking."""

    booked_days: int
    booked_hours: int
    vehicle_amount: Decimal
    driver_amount: Decimal = Decimal("0")
    total_amount: Decimal
    currency: str


class BookingPayload(BaseModel):
    """Body of the booking submission call."""

    model_config = ConfigDict(populate_by_name=True)

    vehicle_id: str = Field(alias="vehicleId")
    user_id: str = Field(alias="userId")
    company_id: Optional[str] = Field(default=None, alias="companyId")
    driver_id: Optional[str] = Field(default=None, alias="driverId")
    from_date: date = Field(alias="fromDate")
    to_date: date = Field(alias="toDate")
    from_time: str = Field(alias="fromTime", pattern=HHMM_PATTERN)
    to_time: str = Field(alias="toTime", pattern=HHMM_PATTERN)
    intercity: bool = False
    city_name: str = Field(default="", alias="cityName")
    total_amount: Decimal = Field(alias="totalAmount", ge=0)
    status: Literal["pending", "confirmed"] = "pending"

    @field_serializer("total_amount")
    def _amount_as_number(self, value: Decimal) -> Union[int, float]:
        if value == value.to_integral_value():
            return int(value)
        return float(value)

    def to_api(self) -> dict:
        """Render the camelCase JSON body expected by the booking API."""
        return self.model_dump(by_alias=True, mode="json")
