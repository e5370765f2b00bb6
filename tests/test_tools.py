"""Tests for the mock booking, payment and directory backends."""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from carrental.schemas.booking_schema import BookingPayload
from carrental.tools import booking, directory, payment


def _payload(total: str = "3000", **overrides) -> BookingPayload:
    data = dict(
        vehicle_id="veh-corolla-01",
        user_id="user-1",
        company_id="co-lahore-rides",
        from_date=date(2024, 6, 10),
        to_date=date(2024, 6, 10),
        from_time="10:00",
        to_time="14:00",
        total_amount=Decimal(total),
    )
    data.update(overrides)
    return BookingPayload(**data)


class TestBooking:
    def test_create_pending(self):
        result = booking.create_booking(_payload())
        assert result["success"]
        assert len(result["booking_id"]) == 24
        record = booking.get_booking(result["booking_id"])
        assert record["status"] == "pending"
        assert record["vehicleId"] == "veh-corolla-01"
        assert "createdAt" in record

    def test_non_positive_amount_rejected(self):
        result = booking.create_booking(_payload("0"))
        assert not result["success"]
        assert "positive" in result["message"]

    def test_confirm(self):
        booking_id = booking.create_booking(_payload())["booking_id"]
        result = booking.confirm_booking(booking_id)
        assert result["success"]
        assert booking.get_booking(booking_id)["status"] == "confirmed"

    def test_confirm_unknown(self):
        assert not booking.confirm_booking("missing")["success"]

    def test_delete(self):
        booking_id = booking.create_booking(_payload())["booking_id"]
        assert booking.delete_booking(booking_id)["success"]
        assert booking.get_booking(booking_id) is None

    def test_delete_unknown(self):
        result = booking.delete_booking("missing")
        assert not result["success"]
        assert "not found" in result["message"]

    def test_reset(self):
        booking_id = booking.create_booking(_payload())["booking_id"]
        booking.reset()
        assert booking.get_booking(booking_id) is None


class TestPayment:
    def test_create_intent(self):
        result = payment.create_payment_intent("bk-1", Decimal("5600"), "usd")
        assert result["success"]
        assert result["client_secret"].startswith(result["intent_id"])
        intent = payment.get_intent(result["intent_id"])
        assert intent["booking_id"] == "bk-1"
        assert intent["status"] == "requires_payment_method"

    def test_non_positive_amount(self):
        assert not payment.create_payment_intent("bk-1", Decimal("0"), "usd")["success"]

    def test_confirm(self):
        intent_id = payment.create_payment_intent("bk-1", Decimal("10"), "usd")["intent_id"]
        assert payment.confirm_payment(intent_id, "bk-1", "user-1")["success"]
        assert payment.get_intent(intent_id)["status"] == "succeeded"

    def test_confirm_wrong_booking(self):
        intent_id = payment.create_payment_intent("bk-1", Decimal("10"), "usd")["intent_id"]
        result = payment.confirm_payment(intent_id, "bk-2", "user-1")
        assert not result["success"]
        assert "does not belong" in result["message"]

    def test_confirm_unknown_intent(self):
        assert not payment.confirm_payment("pi_missing", "bk-1", "user-1")["success"]


class TestDirectory:
    def test_seeded_vehicle(self):
        vehicle = directory.get_vehicle("veh-corolla-01")
        assert vehicle.daily_rate == Decimal("3000")
        assert vehicle.company_id == "co-lahore-rides"
        assert len(vehicle.blackout_periods) == 1

    def test_unknown_ids(self):
        assert directory.get_vehicle("veh-none") is None
        assert directory.get_driver("drv-none") is None

    def test_list_company_drivers_in_registration_order(self):
        ids = [d.id for d in directory.list_company_drivers("co-lahore-rides")]
        assert ids == ["drv-ali-01", "drv-sana-02", "drv-usman-03"]

    def test_add_driver(self):
        directory.add_driver({
            "_id": "drv-new", "company": "co-lahore-rides",
            "baseDailyRate": 1000, "baseHourlyRate": 100,
        })
        assert directory.list_company_drivers("co-lahore-rides")[-1].id == "drv-new"

    def test_add_invalid_vehicle(self):
        with pytest.raises(ValidationError):
            directory.add_vehicle({"_id": "veh-bad", "rent": -5})
        assert directory.get_vehicle("veh-bad") is None

    def test_stored_record_is_a_copy(self):
        raw = {"_id": "veh-new", "rent": 100}
        directory.add_vehicle(raw)
        raw["rent"] = 999
        assert directory.get_vehicle("veh-new").daily_rate == Decimal("100")

    def test_reset_restores_seeds(self):
        directory.add_vehicle({"_id": "veh-new", "rent": 100})
        directory.reset()
        assert directory.get_vehicle("veh-new") is None
        assert directory.get_vehicle("veh-civic-02") is not None
