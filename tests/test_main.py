"""Tests for the command-line entry point."""

import json
import sys

import pytest

import main as cli

RECORD = {
    "address": "12 Main St, Nashua, NH",
    "latitude": 42.76,
    "longitude": -71.46,
    "booking_date": "2025-03-17",
    "booking_time": "08:00",
    "is_anchor": True,
    "distance_from_base": 11.2,
    "travel_time_from_base": 20,
}


def _run(monkeypatch, *argv: str) -> None:
    monkeypatch.setattr(sys, "argv", ["main.py", *argv])
    cli.main()


class TestBookingsFile:
    def test_day_command_prints_statistics(self, tmp_path, monkeypatch, capsys):
        bookings = tmp_path / "bookings.json"
        bookings.write_text(json.dumps([RECORD]))
        _run(monkeypatch, "--bookings", str(bookings), "day", "--date", "2025-03-17")
        output = json.loads(capsys.readouterr().out)
        assert output["booking_count"] == 1
        assert output["anchor_address"] == "12 Main St, Nashua, NH"

    def test_malformed_json_exits_with_input_error(self, tmp_path, monkeypatch, caplog):
        bookings = tmp_path / "bookings.json"
        bookings.write_text("[{not json")
        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch, "--bookings", str(bookings), "day", "--date", "2025-03-17")
        assert exc.value.code == 2
        assert "Invalid input" in caplog.text

    def test_invalid_record_exits_with_input_error(self, tmp_path, monkeypatch, caplog):
        bookings = tmp_path / "bookings.json"
        bookings.write_text(json.dumps([{"address": "12 Main St, Nashua, NH"}]))
        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch, "--bookings", str(bookings), "week", "--date", "2025-03-17")
        assert exc.value.code == 2
        assert "Invalid input" in caplog.text

    def test_missing_file_exits(self, tmp_path, monkeypatch):
        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch, "--bookings", str(tmp_path / "absent.json"),
                 "day", "--date", "2025-03-17")
        assert exc.value.code == 1

    def test_bad_date_exits_with_input_error(self, monkeypatch):
        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch, "day", "--date", "17/03/2025")
        assert exc.value.code == 2
