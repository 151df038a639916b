from __future__ import annotations

import calendar
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable, Dict, List

from ..attendance.aggregator import group_by_date
from ..attendance.evaluator import classify_working_day, expected_hours, working_days_in_range
from ..attendance.model import AttendanceSession
from ..attendance.repository import AttendanceSessionStore
from ..common.datetime_utils import now_local
from ..common.duration import format_duration
from ..common.validators import require_month, require_year
from ..core.enums import DayAttendance
from ..employees.repository import EmployeeRepository


@dataclass(frozen=True)
class EmployeeAttendanceStats:
    employee_id: str
    employee_name: str
    total_working_days: int
    days_present: int
    days_half: int
    days_absent: int
    total_minutes: int
    attendance_percentage: float
    daily: Dict[date, DayAttendance] = field(default_factory=dict)

    @property
    def total_hours_worked(self) -> float:
        return self.total_minutes / 60


class AttendanceReportService:
    """Admin view: every active employee's attendance over one month."""

    def __init__(
        self,
        sessions: AttendanceSessionStore,
        employees: EmployeeRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._sessions = sessions
        self._employees = employees
        self._clock = clock

    def monthly_stats(self, *, month: int, year: int) -> List[EmployeeAttendanceStats]:
        month = require_month(month)
        year = require_year(year)
        start = date(year, month, 1)
        end = date(year, month, calendar.monthrange(year, month)[1])

        by_employee: Dict[str, List[AttendanceSession]] = defaultdict(list)
        for s in self._sessions.query_range(start=start, end=end):
            by_employee[s.employee_id].append(s)

        now = self._clock()
        stats = []
        for employee in self._employees.list_active():
            summaries = group_by_date(by_employee.get(employee.employee_id, []), now=now)
            minutes_by_day = {d.work_date: d.total_minutes for d in summaries}

            daily: Dict[date, DayAttendance] = {}
            for day in working_days_in_range(start, end, employee.schedule):
                expected_minutes = expected_hours(day, employee.schedule) * 60
                daily[day] = classify_working_day(minutes_by_day.get(day, 0), expected_minutes)

            working_days = len(daily)
            present = sum(1 for v in daily.values() if v == DayAttendance.PRESENT)
            stats.append(
                EmployeeAttendanceStats(
                    employee_id=employee.employee_id,
                    employee_name=employee.name,
                    total_working_days=working_days,
                    days_present=present,
                    days_half=sum(1 for v in daily.values() if v == DayAttendance.HALF_DAY),
                    days_absent=sum(1 for v in daily.values() if v == DayAttendance.ABSENT),
                    total_minutes=sum(minutes_by_day.values()),
                    attendance_percentage=(present / working_days * 100) if working_days else 0.0,
                    daily=daily,
                )
            )

        stats.sort(key=lambda s: s.attendance_percentage, reverse=True)
        return stats

    def monthly_report_ui(self, *, month: int, year: int) -> List[dict]:
        return [
            {
                "employee_id": s.employee_id,
                "employee_name": s.employee_name,
                "total_working_days": s.total_working_days,
                "days_present": s.days_present,
                "days_half": s.days_half,
                "days_absent": s.days_absent,
                "total_hours": format_duration(s.total_minutes),
                "attendance_percentage": round(s.attendance_percentage, 1),
            }
            for s in self.monthly_stats(month=month, year=year)
        ]
