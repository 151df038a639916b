from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus
from .model import LeaveRequest


class LeaveRepository(Protocol):
    def create(
        self,
        *,
        employee_id: str,
        start_date: date,
        end_date: date,
        reason: str,
        description: str,
        requested_at: datetime,
    ) -> int:
        raise NotImplementedError

    def get(self, *, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        status: Optional[LeaveStatus] = None,
        employee_id: Optional[str] = None,
        limit: int = 200,
    ) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: LeaveStatus,
        decided_by: str,
        decided_at: datetime,
        admin_note: Optional[str] = None,
    ) -> bool:
        """Only pending requests can be decided; returns False otherwise."""

        raise NotImplementedError
