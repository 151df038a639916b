from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_LEAVE_LIST_LIMIT
from ..core.enums import LeaveStatus, Role
from ..core.exceptions import AuthorizationError, ValidationError
from .model import LeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


class LeaveService:
    def __init__(self, leaves: LeaveRepository, *, clock: Callable[[], datetime] = now_local):
        self._leaves = leaves
        self._clock = clock

    def submit(
        self,
        *,
        current_role: Role,
        employee_id: str,
        start_date: date,
        end_date: date,
        reason: str,
        description: str = "",
    ) -> int:
        if current_role not in {Role.EMPLOYEE, Role.INTERN}:
            raise AuthorizationError("Only employees can request leave")

        if end_date < start_date:
            raise ValidationError("End date must be on or after start date")

        reason = require_non_empty(reason, "Reason")
        request_id = self._leaves.create(
            employee_id=str(employee_id),
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            description=(description or "").strip(),
            requested_at=self._clock(),
        )
        logger.info("Leave request %s submitted", request_id, extra={"employee_id": str(employee_id)})
        return request_id

    def approve(self, *, current_role: Role, admin_id: str, request_id: int, admin_note: str = "") -> None:
        self._decide(current_role, admin_id, request_id, LeaveStatus.APPROVED, admin_note)

    def reject(self, *, current_role: Role, admin_id: str, request_id: int, admin_note: str = "") -> None:
        self._decide(current_role, admin_id, request_id, LeaveStatus.REJECTED, admin_note)

    def _decide(self, current_role: Role, admin_id: str, request_id: int, status: LeaveStatus, admin_note: str) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        req = self._leaves.get(request_id=int(request_id))
        if not req:
            raise ValidationError("Leave request not found")
        if req.status != LeaveStatus.PENDING:
            raise ValidationError("Leave request was already processed")

        ok = self._leaves.decide(
            request_id=int(request_id),
            status=status,
            decided_by=str(admin_id),
            decided_at=self._clock(),
            admin_note=(admin_note or "").strip() or None,
        )
        if not ok:
            raise ValidationError("Leave request was already processed")

    def list_mine(self, *, employee_id: str) -> Sequence[LeaveRequest]:
        return self._leaves.list_requests(employee_id=str(employee_id), limit=DEFAULT_LEAVE_LIST_LIMIT)

    def list_pending(self, *, status: Optional[LeaveStatus] = LeaveStatus.PENDING) -> Sequence[LeaveRequest]:
        return self._leaves.list_requests(status=status, limit=DEFAULT_LEAVE_LIST_LIMIT)

    @staticmethod
    def to_ui(req: LeaveRequest) -> dict:
        return {
            "request_id": req.request_id,
            "employee_id": req.employee_id,
            "start_date": req.start_date.strftime("%Y-%m-%d"),
            "end_date": req.end_date.strftime("%Y-%m-%d"),
            "days": req.days,
            "reason": req.reason,
            "description": req.description,
            "status": req.status.value,
            "requested_at": req.requested_at.strftime("%Y-%m-%d %H:%M"),
            "admin_note": req.admin_note or "",
        }
