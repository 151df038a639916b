from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveStatus


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    employee_id: str
    start_date: date
    end_date: date
    reason: str
    status: LeaveStatus
    requested_at: datetime
    description: str = ""
    responded_at: Optional[datetime] = None
    responded_by: Optional[str] = None
    admin_note: Optional[str] = None

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1
