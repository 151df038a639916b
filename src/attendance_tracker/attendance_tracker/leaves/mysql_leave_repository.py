from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import LeaveStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, store_errors
from .model import LeaveRequest
from .repository import LeaveRepository

_COLUMNS = """
    request_id, employee_id, start_date, end_date, reason, description, status,
    requested_at, responded_at, responded_by, admin_note
"""


def _row_to_leave(r: Dict[str, Any]) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        employee_id=str(r["employee_id"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        reason=r["reason"],
        description=r.get("description") or "",
        status=LeaveStatus(r["status"]),
        requested_at=r["requested_at"],
        responded_at=r.get("responded_at"),
        responded_by=r.get("responded_by"),
        admin_note=r.get("admin_note"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        with store_errors("create leave request", write=True), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(employee_id, start_date, end_date, reason, description, status, requested_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (str(employee_id), start_date, end_date, reason, description, LeaveStatus.PENDING.value, requested_at),
            )
            return int(cur.lastrowid)

    def get(self, *, request_id: int) -> Optional[LeaveRequest]:
        with store_errors("load leave request"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _row_to_leave(r) if r else None

    def list_requests(
        self,
        *,
        status: Optional[LeaveStatus] = None,
        employee_id: Optional[str] = None,
        limit: int = 200,
    ) -> Sequence[LeaveRequest]:
        clauses = ["1=1"]
        params: list[object] = []

        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(str(employee_id))

        where = " AND ".join(clauses)

        with store_errors("list leave requests"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE {where}
                ORDER BY requested_at DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_row_to_leave(r) for r in fetchall(cur)]

    def decide(
        self,
        *,
        request_id: int,
        status: LeaveStatus,
        decided_by: str,
        decided_at: datetime,
        admin_note: Optional[str] = None,
    ) -> bool:
        with store_errors("decide leave request", write=True), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, responded_by=%s, responded_at=%s, admin_note=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    status.value,
                    str(decided_by),
                    decided_at,
                    admin_note,
                    int(request_id),
                    LeaveStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0
