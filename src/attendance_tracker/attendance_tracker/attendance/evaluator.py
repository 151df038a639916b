from __future__ import annotations

from datetime import date, timedelta
from typing import Optional

from ..common.datetime_utils import weekday_name
from ..core.constants import (
    BEHIND_THRESHOLD,
    DEFAULT_FULL_DAY_HOURS,
    HALF_DAY_RATIO,
    ON_TRACK_THRESHOLD,
    PRESENT_RATIO,
)
from ..core.enums import DayAttendance, DayType, ProgressStatus
from ..employees.model import WorkingHoursSchedule
from .model import DailySummary, DayEvaluation


def expected_hours(work_date: date, schedule: Optional[WorkingHoursSchedule]) -> float:
    """Scheduled hours for ``work_date``; 0 on non-working days."""
    if schedule is None:
        return 0.0
    if not schedule.works_on(weekday_name(work_date)):
        return 0.0
    return float(schedule.total_hours_per_day)


def completion_percentage(actual_hours: float, expected: float) -> float:
    # No target means 0%, even when hours were worked on a day off.
    if expected <= 0:
        return 0.0
    return min(100.0, actual_hours / expected * 100.0)


def classify(percentage: float) -> ProgressStatus:
    if percentage >= 100.0:
        return ProgressStatus.COMPLETED
    if percentage >= ON_TRACK_THRESHOLD:
        return ProgressStatus.ON_TRACK
    if percentage >= BEHIND_THRESHOLD:
        return ProgressStatus.BEHIND
    return ProgressStatus.FAR_BEHIND


def classify_day_type(total_minutes: int, *, full_day_hours: float = DEFAULT_FULL_DAY_HOURS) -> DayType:
    hours = total_minutes / 60
    if hours >= full_day_hours:
        return DayType.FULL
    if hours > 0:
        return DayType.HALF
    return DayType.ABSENT


class ScheduleEvaluator:
    """Annotates daily summaries against an employee's working hours."""

    def __init__(self, *, full_day_hours: float = DEFAULT_FULL_DAY_HOURS):
        self._full_day_hours = float(full_day_hours)

    def evaluate_day(self, summary: DailySummary, schedule: Optional[WorkingHoursSchedule]) -> DayEvaluation:
        actual = summary.total_minutes / 60
        expected = expected_hours(summary.work_date, schedule)
        pct = completion_percentage(actual, expected)
        return DayEvaluation(
            work_date=summary.work_date,
            actual_hours=actual,
            expected_hours=expected,
            completion_percentage=pct,
            status=classify(pct),
            day_type=classify_day_type(summary.total_minutes, full_day_hours=self._full_day_hours),
        )


def working_days_in_range(start: date, end: date, schedule: Optional[WorkingHoursSchedule]) -> list[date]:
    if schedule is None:
        return []
    days = []
    current = start
    while current <= end:
        if schedule.works_on(weekday_name(current)):
            days.append(current)
        current += timedelta(days=1)
    return days


def classify_working_day(total_minutes: int, expected_minutes: float) -> DayAttendance:
    """Present at 75% of the target, half-day at 25%, otherwise absent."""
    if total_minutes <= 0:
        return DayAttendance.ABSENT
    if total_minutes >= expected_minutes * PRESENT_RATIO:
        return DayAttendance.PRESENT
    if total_minutes >= expected_minutes * HALF_DAY_RATIO:
        return DayAttendance.HALF_DAY
    return DayAttendance.ABSENT
