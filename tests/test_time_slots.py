"""Tests for time conflict detection and open slot proposals."""

from datetime import time

from anchor_scheduler.scheduling.time_slots import (
    NO_AVAILABLE_SLOTS,
    find_open_slots,
    find_time_conflicts,
    pick_preferred_slot,
)
from tests.conftest import make_booking


def _times(*labels: str) -> list[time]:
    return [time(*(int(p) for p in label.split(":"))) for label in labels]


class TestFindTimeConflicts:
    def test_conflict_inside_gap(self):
        bookings = [make_booking("a", booking_time="08:00", customer_name="Ann")]
        conflicts = find_time_conflicts(bookings, time(10, 0), 240)
        assert len(conflicts) == 1
        assert conflicts[0].time == time(8, 0)
        assert conflicts[0].minutes_apart == 120
        assert conflicts[0].customer_name == "Ann"

    def test_exact_gap_is_allowed(self):
        bookings = [make_booking("a", booking_time="08:00")]
        assert find_time_conflicts(bookings, time(12, 0), 240) == []

    def test_gap_is_symmetric(self):
        bookings = [make_booking("a", booking_time="14:00")]
        assert len(find_time_conflicts(bookings, time(11, 0), 240)) == 1

    def test_no_wraparound_across_midnight(self):
        bookings = [make_booking("a", booking_time="23:00")]
        assert find_time_conflicts(bookings, time(1, 0), 240) == []

    def test_reports_every_conflicting_booking(self):
        bookings = [
            make_booking("a", booking_time="08:00"),
            make_booking("b", booking_time="13:00"),
        ]
        conflicts = find_time_conflicts(bookings, time(10, 30), 240)
        assert [c.time for c in conflicts] == _times("08:00", "13:00")


class TestFindOpenSlots:
    def test_slot_before_first_booking(self):
        assert find_open_slots(_times("14:00"), 8, 18, 240) == ["10:00"]

    def test_slot_after_last_booking(self):
        assert find_open_slots(_times("08:00"), 8, 18, 240) == ["12:00"]

    def test_midpoint_of_wide_gap(self):
        assert find_open_slots(_times("08:00", "16:30"), 8, 18, 240) == ["12:00"]

    def test_narrow_gap_has_no_midpoint(self):
        slots = find_open_slots(_times("08:00", "15:00"), 8, 18, 240)
        assert slots == [NO_AVAILABLE_SLOTS]

    def test_unsorted_input(self):
        assert find_open_slots(_times("16:30", "08:00"), 8, 18, 240) == ["12:00"]

    def test_full_day_reports_sentinel(self):
        slots = find_open_slots(_times("08:00", "12:00", "16:00"), 8, 18, 240)
        assert slots == [NO_AVAILABLE_SLOTS]

    def test_no_bookings_reports_sentinel(self):
        assert find_open_slots([], 8, 18, 240) == [NO_AVAILABLE_SLOTS]

    def test_slots_floor_to_whole_hours(self):
        assert find_open_slots(_times("14:30"), 8, 18, 240) == ["10:00"]

    def test_all_three_kinds(self):
        slots = find_open_slots(_times("12:00"), 6, 22, 240)
        assert slots == ["08:00", "16:00"]
        slots = find_open_slots(_times("10:00", "18:00"), 6, 23, 240)
        assert slots == ["06:00", "14:00", "22:00"]


class TestPickPreferredSlot:
    PREFERRED = ("08:00", "11:30", "15:00")

    def test_first_slot_on_empty_day(self):
        assert pick_preferred_slot([], self.PREFERRED) == time(8, 0)

    def test_skips_taken_slots(self):
        assert pick_preferred_slot(_times("08:00"), self.PREFERRED) == time(11, 30)

    def test_none_when_all_taken(self):
        assert pick_preferred_slot(_times("08:00", "11:30", "15:00"), self.PREFERRED) is None

    def test_other_times_do_not_block(self):
        assert pick_preferred_slot(_times("09:00", "13:00"), self.PREFERRED) == time(8, 0)
