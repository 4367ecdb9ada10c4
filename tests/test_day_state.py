"""Tests for the day capacity / anchor model and working-day rules."""

from datetime import date, time

from anchor_scheduler.scheduling.calendar_rules import (
    is_working_day,
    shift_to_working_day,
    week_range,
)
from anchor_scheduler.scheduling.day_state import load_day_state
from tests.conftest import (
    CLOSE,
    FRIDAY,
    MONDAY,
    NEXT_MONDAY,
    SATURDAY,
    SUNDAY,
    TUESDAY,
    WEDNESDAY,
    fill_day,
    make_booking,
)

WEEKDAYS = (0, 1, 2, 3, 4)


class TestWorkingDays:
    def test_weekdays_are_working(self):
        assert is_working_day(MONDAY, WEEKDAYS)
        assert is_working_day(FRIDAY, WEEKDAYS)

    def test_weekend_is_not_working(self):
        assert not is_working_day(SATURDAY, WEEKDAYS)
        assert not is_working_day(SUNDAY, WEEKDAYS)

    def test_empty_policy_means_every_day(self):
        assert is_working_day(SUNDAY, ())

    def test_shift_inclusive(self):
        assert shift_to_working_day(MONDAY, WEEKDAYS) == MONDAY
        assert shift_to_working_day(SATURDAY, WEEKDAYS) == NEXT_MONDAY

    def test_shift_exclusive(self):
        assert shift_to_working_day(MONDAY, WEEKDAYS, include_start=False) == TUESDAY
        assert shift_to_working_day(FRIDAY, WEEKDAYS, include_start=False) == NEXT_MONDAY

    def test_shift_with_sparse_policy(self):
        assert shift_to_working_day(MONDAY, (6,)) == SUNDAY
        assert shift_to_working_day(MONDAY, (0,), include_start=False) == NEXT_MONDAY

    def test_week_range_is_monday_to_sunday(self):
        assert week_range(WEDNESDAY) == (MONDAY, SUNDAY)
        assert week_range(SUNDAY) == (MONDAY, SUNDAY)
        assert week_range(MONDAY) == (MONDAY, SUNDAY)


class TestDayState:
    def test_empty_day(self, store):
        state = load_day_state(store, MONDAY, 3)
        assert state.is_empty
        assert state.count == 0
        assert state.anchor is None
        assert state.route_anchor is None
        assert not state.is_full

    def test_ordered_by_time_not_creation(self, store):
        store.insert_booking(make_booking("late", booking_time="15:00", is_anchor=True))
        store.insert_booking(make_booking("early", booking_time="08:00", created_offset_min=5))
        state = load_day_state(store, MONDAY, 3)
        assert [b.id for b in state.bookings] == ["early", "late"]
        assert state.booked_times == [time(8, 0), time(15, 0)]
        assert state.anchor.id == "late"

    def test_full_at_capacity(self, store):
        fill_day(store, MONDAY, count=3)
        assert load_day_state(store, MONDAY, 3).is_full
        assert not load_day_state(store, MONDAY, 4).is_full

    def test_missing_anchor_flag(self, store):
        store.insert_booking(make_booking("b", booking_time="12:00", address=CLOSE))
        store.insert_booking(make_booking("a", booking_time="09:00"))
        state = load_day_state(store, MONDAY, 3)
        assert state.anchor is None
        assert state.route_anchor.id == "a"

    def test_only_requested_date(self, store):
        fill_day(store, MONDAY, count=2)
        fill_day(store, TUESDAY, count=1)
        assert load_day_state(store, MONDAY, 3).count == 2
        assert load_day_state(store, TUESDAY, 3).count == 1
        assert load_day_state(store, date(2025, 3, 19), 3).count == 0

    def test_reads_fresh_each_call(self, store):
        first = load_day_state(store, MONDAY, 3)
        store.insert_booking(make_booking("new", is_anchor=True))
        second = load_day_state(store, MONDAY, 3)
        assert first.count == 0
        assert second.count == 1

    def test_statistics(self, store):
        fill_day(store, MONDAY, count=3)
        stats = load_day_state(store, MONDAY, 3).statistics()
        assert stats.date == MONDAY
        assert stats.booking_count == 3
        assert stats.capacity == 3
        assert stats.is_full
        assert stats.has_anchor
        assert stats.anchor_address == "1 Near St, Chelmsford, MA"
        assert len(stats.bookings) == 3
