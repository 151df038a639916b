from __future__ import annotations

from datetime import time

from ..core.enums import Role
from .model import WorkingHoursSchedule

WEEKDAYS = frozenset({"Monday", "Tuesday", "Wednesday", "Thursday", "Friday"})


def default_working_hours(role: Role) -> WorkingHoursSchedule:
    """Schedule template used when an employee record carries none."""

    if role == Role.ADMIN:
        return WorkingHoursSchedule(
            start_time=time(8, 30),
            end_time=time(17, 30),
            working_days=WEEKDAYS,
            total_hours_per_day=8.5,
            total_hours_per_week=42.5,
        )
    if role == Role.INTERN:
        return WorkingHoursSchedule(
            start_time=time(10, 0),
            end_time=time(16, 0),
            working_days=WEEKDAYS,
            total_hours_per_day=6.0,
            total_hours_per_week=30.0,
        )
    return WorkingHoursSchedule(
        start_time=time(9, 0),
        end_time=time(17, 0),
        working_days=WEEKDAYS,
        total_hours_per_day=8.0,
        total_hours_per_week=40.0,
    )
