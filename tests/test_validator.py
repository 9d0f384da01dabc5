from datetime import date, datetime

import pytest
from pydantic import ValidationError

from conftest import make_appointment
from practice_calendar.scheduling.calendar import CalendarSettings
from practice_calendar.scheduling.validator import (
    Accepted,
    BookingRequest,
    Rejected,
    RejectionKind,
    validate_booking,
)

NOW = datetime(2025, 1, 6, 8, 0)  # Monday morning
SETTINGS = CalendarSettings(slot_interval_minutes=30, buffer_minutes=10)


def _request(d: date, time_of_day: str, duration: int | None = None, practitioner_id: str = "dr-lee") -> BookingRequest:
    return BookingRequest(practitioner_id=practitioner_id, date=d, time_of_day=time_of_day, duration_minutes=duration)


def test_free_slot_is_accepted():
    result = validate_booking(_request(date(2025, 1, 6), "09:00"), SETTINGS, [], now=NOW)
    assert isinstance(result, Accepted)
    assert result.accepted


def test_start_exactly_now_is_accepted():
    result = validate_booking(_request(date(2025, 1, 6), "09:00"), SETTINGS, [], now=datetime(2025, 1, 6, 9, 0))
    assert isinstance(result, Accepted)


def test_past_request_is_rejected():
    result = validate_booking(_request(date(2025, 1, 3), "10:00"), SETTINGS, [], now=NOW)
    assert isinstance(result, Rejected)
    assert result.kind == RejectionKind.IN_THE_PAST
    assert not result.accepted


def test_past_wins_over_outside_hours():
    result = validate_booking(_request(date(2025, 1, 3), "20:00"), SETTINGS, [], now=NOW)
    assert result.kind == RejectionKind.IN_THE_PAST


def test_non_working_day_wins_over_outside_hours():
    result = validate_booking(_request(date(2025, 1, 11), "20:00"), SETTINGS, [], now=NOW)
    assert result.kind == RejectionKind.NON_WORKING_DAY


def test_outside_working_hours():
    before = validate_booking(_request(date(2025, 1, 6), "08:30"), SETTINGS, [], now=NOW)
    closing = validate_booking(_request(date(2025, 1, 6), "17:00"), SETTINGS, [], now=NOW)
    last = validate_booking(_request(date(2025, 1, 6), "16:30"), SETTINGS, [], now=NOW)
    assert before.kind == RejectionKind.OUTSIDE_WORKING_HOURS
    assert closing.kind == RejectionKind.OUTSIDE_WORKING_HOURS
    assert isinstance(last, Accepted)


def test_outside_hours_wins_over_conflict():
    existing = [make_appointment(datetime(2025, 1, 6, 17, 0), 60)]
    result = validate_booking(_request(date(2025, 1, 6), "17:00"), SETTINGS, existing, now=NOW)
    assert result.kind == RejectionKind.OUTSIDE_WORKING_HOURS


def test_conflict_carries_blocking_appointments():
    booked = make_appointment(datetime(2025, 1, 6, 10, 0), 30, id=4)
    result = validate_booking(_request(date(2025, 1, 6), "10:30"), SETTINGS, [booked], now=NOW)
    assert isinstance(result, Rejected)
    assert result.kind == RejectionKind.SCHEDULING_CONFLICT
    assert result.blocking_appointments == [booked]
    assert result.message == "This slot is no longer available, please choose another."


def test_conflicts_use_request_duration():
    booked = make_appointment(datetime(2025, 1, 6, 11, 0), 30)
    short = validate_booking(_request(date(2025, 1, 6), "10:00", duration=30), SETTINGS, [booked], now=NOW)
    long = validate_booking(_request(date(2025, 1, 6), "10:00", duration=60), SETTINGS, [booked], now=NOW)
    assert isinstance(short, Accepted)
    assert long.kind == RejectionKind.SCHEDULING_CONFLICT


def test_other_practitioner_bookings_are_ignored():
    booked = make_appointment(datetime(2025, 1, 6, 10, 0), 30, practitioner_id="dr-patel")
    result = validate_booking(_request(date(2025, 1, 6), "10:00"), SETTINGS, [booked], now=NOW)
    assert isinstance(result, Accepted)


def test_rescheduled_appointment_does_not_block_itself():
    booked = make_appointment(datetime(2025, 1, 6, 10, 0), 30, id=9)
    result = validate_booking(
        _request(date(2025, 1, 6), "10:00"), SETTINGS, [booked], now=NOW, exclude_appointment_id=9
    )
    assert isinstance(result, Accepted)


def test_validator_keeps_no_state_between_calls():
    booked = make_appointment(datetime(2025, 1, 6, 10, 0), 30)
    request = _request(date(2025, 1, 6), "10:00")
    assert validate_booking(request, SETTINGS, [booked], now=NOW).kind == RejectionKind.SCHEDULING_CONFLICT
    assert isinstance(validate_booking(request, SETTINGS, [], now=NOW), Accepted)


def test_request_time_must_be_hh_mm():
    with pytest.raises(ValidationError):
        _request(date(2025, 1, 6), "9am")
    with pytest.raises(ValidationError):
        _request(date(2025, 1, 6), "24:00")
    with pytest.raises(ValidationError):
        _request(date(2025, 1, 6), "10:00", duration=0)


def test_default_now_rejects_long_past_dates():
    result = validate_booking(_request(date(2000, 1, 3), "10:00"), SETTINGS, [])
    assert result.kind == RejectionKind.IN_THE_PAST


def test_practitioner_id_is_stripped_and_required():
    assert _request(date(2025, 1, 6), "10:00", practitioner_id="  dr-lee ").practitioner_id == "dr-lee"
    with pytest.raises(ValidationError):
        _request(date(2025, 1, 6), "10:00", practitioner_id="   ")
