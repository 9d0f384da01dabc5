from datetime import UTC, datetime, timedelta, timezone

from conftest import make_appointment
from practice_calendar.scheduling.conflicts import (
    find_conflicts,
    has_conflict,
    intervals_overlap,
    padded_interval,
)

TEN = datetime(2025, 1, 6, 10, 0)


def test_half_open_overlap():
    a, b = datetime(2025, 1, 6, 9), datetime(2025, 1, 6, 10)
    assert intervals_overlap(a, b, a, b)
    assert intervals_overlap(a, b, a + timedelta(minutes=59), b + timedelta(hours=1))
    # touching intervals do not overlap
    assert not intervals_overlap(a, b, b, b + timedelta(hours=1))
    assert not intervals_overlap(b, b + timedelta(hours=1), a, b)


def test_padded_interval():
    assert padded_interval(TEN, 30, 10) == (datetime(2025, 1, 6, 9, 50), datetime(2025, 1, 6, 10, 40))
    assert padded_interval(TEN, 30, 0) == (TEN, datetime(2025, 1, 6, 10, 30))


def test_buffer_after_existing_appointment():
    existing = [make_appointment(TEN, 60)]
    assert has_conflict(datetime(2025, 1, 6, 10, 59), 60, 15, existing)
    assert has_conflict(datetime(2025, 1, 6, 11, 14), 60, 15, existing)
    assert not has_conflict(datetime(2025, 1, 6, 11, 15), 60, 15, existing)


def test_buffer_before_existing_appointment():
    existing = [make_appointment(TEN, 60)]
    assert has_conflict(datetime(2025, 1, 6, 8, 46), 60, 15, existing)
    assert not has_conflict(datetime(2025, 1, 6, 8, 45), 60, 15, existing)


def test_back_to_back_without_buffer():
    existing = [make_appointment(TEN, 60)]
    assert not has_conflict(datetime(2025, 1, 6, 11, 0), 60, 0, existing)
    assert not has_conflict(datetime(2025, 1, 6, 9, 0), 60, 0, existing)
    assert has_conflict(datetime(2025, 1, 6, 10, 30), 15, 0, existing)


def test_missing_duration_counts_as_an_hour():
    existing = [make_appointment(TEN, None)]
    assert has_conflict(datetime(2025, 1, 6, 10, 45), 15, 0, existing)
    assert not has_conflict(datetime(2025, 1, 6, 11, 0), 15, 0, existing)


def test_all_blocking_appointments_returned_in_start_order():
    late = make_appointment(datetime(2025, 1, 6, 11, 0), 30, id=2)
    early = make_appointment(datetime(2025, 1, 6, 9, 30), 30, id=1)
    clear = make_appointment(datetime(2025, 1, 6, 14, 0), 30, id=3)
    conflicts = find_conflicts(datetime(2025, 1, 6, 9, 45), 90, 0, [late, clear, early])
    assert [a.id for a in conflicts] == [1, 2]


def test_other_practitioners_never_conflict():
    existing = [make_appointment(TEN, 60, practitioner_id="dr-patel")]
    assert not has_conflict(TEN, 60, 15, existing, practitioner_id="dr-lee")
    assert has_conflict(TEN, 60, 15, existing, practitioner_id="dr-patel")


def test_excluded_appointment_is_ignored():
    existing = [make_appointment(TEN, 60, id=7)]
    assert not has_conflict(TEN, 60, 0, existing, exclude_appointment_id=7)
    assert has_conflict(TEN, 60, 0, existing, exclude_appointment_id=8)


def test_aware_candidate_compares_as_utc():
    existing = [make_appointment(TEN, 60)]
    plus_two = timezone(timedelta(hours=2))
    assert has_conflict(datetime(2025, 1, 6, 12, 30, tzinfo=plus_two), 30, 0, existing)
    assert not has_conflict(datetime(2025, 1, 6, 11, 0, tzinfo=UTC), 30, 0, existing)


def test_other_days_do_not_conflict():
    existing = [make_appointment(TEN - timedelta(days=1), 60), make_appointment(TEN + timedelta(days=1), 60)]
    assert find_conflicts(TEN, 60, 60, existing) == []
