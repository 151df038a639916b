from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Tuple

from ..common.duration import minutes_between, seconds_between
from ..core.enums import DayType, ProgressStatus


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class AttendanceSession:
    """Domain entity: one continuous work interval.

    ``work_date`` is the local calendar day of ``check_in_time`` and never
    moves, even for sessions that run past midnight. ``duration_minutes`` is
    a cache written at check-out; ``derive_duration_minutes`` recomputes it.
    """

    session_id: int
    employee_id: str
    work_date: date
    check_in_time: datetime
    check_out_time: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    location: Optional[Coordinates] = None

    @property
    def is_open(self) -> bool:
        return self.check_out_time is None

    def derive_duration_minutes(self) -> Optional[int]:
        if self.check_out_time is None:
            return None
        return minutes_between(self.check_in_time, self.check_out_time)

    def elapsed_minutes(self, now: datetime) -> int:
        """Closed: the recorded duration. Open: live minutes since check-in."""
        if self.check_out_time is not None:
            if self.duration_minutes is not None:
                return max(int(self.duration_minutes), 0)
            return minutes_between(self.check_in_time, self.check_out_time)
        return minutes_between(self.check_in_time, now)

    def elapsed_seconds(self, now: datetime) -> int:
        end = self.check_out_time if self.check_out_time is not None else now
        return seconds_between(self.check_in_time, end)


@dataclass(frozen=True)
class DailySummary:
    """Read-model: every session of one employee on one calendar date."""

    work_date: date
    sessions: Tuple[AttendanceSession, ...]
    total_minutes: int
    is_open_today: bool

    @property
    def sessions_count(self) -> int:
        return len(self.sessions)

    @property
    def total_hours(self) -> float:
        return self.total_minutes / 60


@dataclass(frozen=True)
class DayEvaluation:
    work_date: date
    actual_hours: float
    expected_hours: float
    completion_percentage: float
    status: ProgressStatus
    day_type: DayType


@dataclass(frozen=True)
class MonthlyRollup:
    month: int
    year: int
    total_minutes: int = 0
    total_days: int = 0
    avg_minutes_per_day: float = 0.0
    total_sessions: int = 0
    days: Tuple[DailySummary, ...] = field(default_factory=tuple)

    @property
    def total_hours(self) -> float:
        return self.total_minutes / 60

    @property
    def avg_hours_per_day(self) -> float:
        return self.avg_minutes_per_day / 60
