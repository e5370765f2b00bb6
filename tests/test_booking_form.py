"""Tests for booking form validation and request building."""

from datetime import date

import pytest

from carrental.checkout.booking_form import BookingForm, FieldStatus


def _fill(form: BookingForm, **values: str) -> None:
    defaults = {
        "from_date": "2024-06-10",
        "to_date": "2024-06-10",
        "from_time": "10:00",
        "to_time": "14:00",
    }
    defaults.update(values)
    for name, value in defaults.items():
        form.set_field(name, value)


class TestSetField:
    def test_valid_date(self, booking_form):
        ok, msg = booking_form.set_field("from_date", "2024-06-10")
        assert ok
        assert "2024-06-10" in msg
        assert booking_form.fields["from_date"].status == FieldStatus.VALID

    def test_date_is_zero_padded(self, booking_form):
        booking_form.set_field("from_date", "2024-6-1")
        assert booking_form.get_value("from_date") == "2024-06-01"

    def test_invalid_date(self, booking_form):
        ok, msg = booking_form.set_field("from_date", "next Tuesday")
        assert not ok
        assert "doesn't look right" in msg
        assert booking_form.fields["from_date"].status == FieldStatus.INVALID

    def test_time_is_zero_padded(self, booking_form):
        booking_form.set_field("from_time", "9:05")
        assert booking_form.get_value("from_time") == "09:05"

    @pytest.mark.parametrize("raw", ["24:00", "12:60", "ten am", "", "12"])
    def test_invalid_times(self, booking_form, raw):
        ok, _ = booking_form.set_field("to_time", raw)
        assert not ok

    def test_correction_keeps_history(self, booking_form):
        booking_form.set_field("from_time", "10:00")
        booking_form.set_field("from_time", "11:00")
        slot = booking_form.fields["from_time"]
        assert slot.history == ["10:00"]
        assert slot.attempts == 2
        assert slot.value == "11:00"

    def test_invalid_after_valid_clears_value(self, booking_form):
        booking_form.set_field("from_time", "10:00")
        booking_form.set_field("from_time", "bogus")
        assert booking_form.get_value("from_time") is None

    def test_unknown_field(self, booking_form):
        with pytest.raises(ValueError, match="Unknown field"):
            booking_form.set_field("favorite_color", "blue")


class TestDriverSelection:
    def test_select(self, booking_form):
        assert booking_form.toggle_driver("drv-1") == "drv-1"

    def test_reselect_deselects(self, booking_form):
        booking_form.toggle_driver("drv-1")
        assert booking_form.toggle_driver("drv-1") is None

    def test_switch_driver(self, booking_form):
        booking_form.toggle_driver("drv-1")
        assert booking_form.toggle_driver("drv-2") == "drv-2"


class TestToRequest:
    def test_complete_form(self, booking_form):
        _fill(booking_form)
        booking_form.toggle_driver("drv-1")
        request = booking_form.to_request()
        assert request.from_date == date(2024, 6, 10)
        assert request.to_time == "14:00"
        assert request.selected_driver_id == "drv-1"

    def test_missing_fields(self, booking_form):
        booking_form.set_field("from_date", "2024-06-10")
        assert not booking_form.is_complete()
        names = [d.name for d in booking_form.missing_fields()]
        assert names == ["to_date", "from_time", "to_time"]
        with pytest.raises(ValueError, match="drop-off date"):
            booking_form.to_request()

    def test_city_is_optional(self, booking_form):
        _fill(booking_form)
        assert booking_form.is_complete()

    def test_inverted_dates_rejected(self, booking_form):
        _fill(booking_form, from_date="2024-06-12", to_date="2024-06-10")
        with pytest.raises(ValueError, match="before pick-up date"):
            booking_form.to_request()

    def test_inverted_same_day_times_rejected(self, booking_form):
        _fill(booking_form, from_time="15:00", to_time="14:00")
        with pytest.raises(ValueError, match="before pick-up time"):
            booking_form.to_request()

    def test_equal_times_allowed(self, booking_form):
        _fill(booking_form, from_time="10:00", to_time="10:00")
        assert booking_form.to_request().from_time == "10:00"

    def test_multi_day_earlier_drop_off_time_allowed(self, booking_form):
        _fill(booking_form, to_date="2024-06-11", from_time="15:00", to_time="09:00")
        assert booking_form.to_request().to_time == "09:00"

    def test_set_dates_from_picker(self, booking_form):
        booking_form.set_dates(date(2024, 6, 10), date(2024, 6, 12))
        assert booking_form.get_value("to_date") == "2024-06-12"

    def test_to_dict(self, booking_form):
        _fill(booking_form)
        booking_form.set_field("city_name", "  Lahore ")
        booking_form.set_intercity(True)
        data = booking_form.to_dict()
        assert data["city_name"] == "Lahore"
        assert data["intercity"] is True
        assert data["driver_id"] is None
