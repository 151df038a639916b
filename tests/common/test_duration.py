from __future__ import annotations

from datetime import datetime

import pytest

from src.attendance_tracker.attendance_tracker.common.duration import (
    format_clock,
    format_duration,
    format_live_duration,
    format_live_seconds,
    minutes_between,
    minutes_to_hours,
    seconds_between,
)


@pytest.mark.parametrize(
    "minutes, expected",
    [
        (0, "0h 0m"),
        (59, "0h 59m"),
        (60, "1h 0m"),
        (510, "8h 30m"),
        (1500, "25h 0m"),
    ],
)
def test_format_duration(minutes, expected):
    assert format_duration(minutes) == expected


def test_format_duration_clamps_negative_to_zero():
    assert format_duration(-15) == "0h 0m"


def test_live_formats_include_seconds():
    assert format_live_seconds(8 * 3600 + 30 * 60 + 12) == "8h 30m 12s"
    assert format_live_duration(1.5) == "0h 1m 30s"


def test_clock_format_is_zero_padded_and_keeps_counting_past_a_day():
    assert format_clock(5) == "00:00:05"
    assert format_clock(30 * 3600 + 61) == "30:01:01"


def test_minutes_between_floors_partial_minutes():
    start = datetime(2026, 3, 2, 9, 0, 0)
    assert minutes_between(start, datetime(2026, 3, 2, 17, 30, 45)) == 510
    assert seconds_between(start, datetime(2026, 3, 2, 9, 0, 59)) == 59
    assert minutes_between(start, datetime(2026, 3, 2, 9, 0, 59)) == 0


def test_negative_span_clamps_to_zero():
    start = datetime(2026, 3, 2, 9, 0, 0)
    assert minutes_between(start, datetime(2026, 3, 2, 8, 55, 0)) == 0
    assert seconds_between(start, datetime(2026, 3, 2, 8, 59, 59)) == 0


def test_minutes_to_hours():
    assert minutes_to_hours(90) == 1.5
