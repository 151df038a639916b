"""Duration helpers shared by the tracker, aggregator and reports.

All helpers work on whole units: minutes are floored, negative spans (clock
skew between devices) clamp to zero, and hours keep accumulating past 23.
"""

from __future__ import annotations

from datetime import datetime


def seconds_between(start: datetime, end: datetime) -> int:
    seconds = int((end - start).total_seconds())
    return max(seconds, 0)


def minutes_between(start: datetime, end: datetime) -> int:
    return seconds_between(start, end) // 60


def split_minutes(minutes: int) -> tuple[int, int]:
    minutes = max(int(minutes), 0)
    return minutes // 60, minutes % 60


def format_duration(minutes: int) -> str:
    """Closed/historical durations: ``"8h 30m"``."""
    hours, mins = split_minutes(minutes)
    return f"{hours}h {mins}m"


def format_live_seconds(seconds: int) -> str:
    seconds = max(int(seconds), 0)
    hours = seconds // 3600
    mins = (seconds % 3600) // 60
    secs = seconds % 60
    return f"{hours}h {mins}m {secs}s"


def format_live_duration(minutes: float) -> str:
    """Ticking duration of an open session: ``"8h 30m 12s"``.

    Takes fractional minutes; callers recompute it from the check-in time on
    every tick instead of caching the string.
    """
    return format_live_seconds(int(float(minutes) * 60))


def format_clock(seconds: int) -> str:
    """Stopwatch layout used by the dashboard clock: ``"08:30:12"``."""
    seconds = max(int(seconds), 0)
    hours = seconds // 3600
    mins = (seconds % 3600) // 60
    secs = seconds % 60
    return f"{hours:02d}:{mins:02d}:{secs:02d}"


def minutes_to_hours(minutes: int) -> float:
    return int(minutes) / 60
