"""Tests for shared date and time helpers."""

from datetime import date, datetime, time

import pytest

from anchor_scheduler.utils import format_hour_slot, format_time, parse_date, parse_time, time_to_minutes


class TestParseTime:
    def test_parses_hh_mm(self):
        assert parse_time("08:30") == time(8, 30)

    def test_strips_whitespace(self):
        assert parse_time(" 15:00 ") == time(15, 0)

    def test_passes_time_through(self):
        assert parse_time(time(9, 5)) == time(9, 5)

    def test_rejects_garbage(self):
        with pytest.raises(ValueError):
            parse_time("half past eight")


class TestParseDate:
    def test_parses_iso(self):
        assert parse_date("2025-03-17") == date(2025, 3, 17)

    def test_datetime_becomes_date(self):
        assert parse_date(datetime(2025, 3, 17, 10, 0)) == date(2025, 3, 17)

    def test_rejects_other_formats(self):
        with pytest.raises(ValueError):
            parse_date("17/03/2025")


class TestMinutes:
    def test_time_to_minutes(self):
        assert time_to_minutes("11:30") == 690
        assert time_to_minutes(time(0, 0)) == 0

    def test_format_time(self):
        assert format_time(time(8, 5)) == "08:05"

    def test_format_hour_slot_floors(self):
        assert format_hour_slot(630) == "10:00"
        assert format_hour_slot(599) == "09:00"
