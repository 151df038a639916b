from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time
from typing import FrozenSet, Optional

from ..core.enums import Role


@dataclass(frozen=True)
class WorkingHoursSchedule:
    """Domain entity: an employee's expected working hours.

    Owned by the identity provider; the attendance core only reads it.
    """

    start_time: time
    end_time: time
    working_days: FrozenSet[str] = field(default_factory=frozenset)
    total_hours_per_day: float = 0.0
    total_hours_per_week: float = 0.0

    def works_on(self, weekday: str) -> bool:
        return weekday in self.working_days


@dataclass(frozen=True)
class Employee:
    """Domain entity: an identity issued by the external auth provider."""

    employee_id: str
    name: str
    email: str
    role: Role
    schedule: Optional[WorkingHoursSchedule] = None
    is_active: bool = True
