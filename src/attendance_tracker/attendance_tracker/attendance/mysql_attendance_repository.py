from __future__ import annotations

import calendar
from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..core.exceptions import OpenSessionConflict, SessionAlreadyClosed, StoreWriteError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, store_errors
from .feed import SessionFeed
from .model import AttendanceSession, Coordinates
from .repository import AttendanceSessionStore, ErrorCallback, SessionsCallback, Unsubscribe

_COLUMNS = """
    session_id, employee_id, work_date, check_in_time, check_out_time,
    duration_minutes, latitude, longitude
"""


def _row_to_session(r: Dict[str, Any]) -> AttendanceSession:
    location = None
    if r.get("latitude") is not None and r.get("longitude") is not None:
        location = Coordinates(latitude=float(r["latitude"]), longitude=float(r["longitude"]))

    duration = r.get("duration_minutes")
    return AttendanceSession(
        session_id=int(r["session_id"]),
        employee_id=str(r["employee_id"]),
        work_date=r["work_date"],
        check_in_time=r["check_in_time"],
        check_out_time=r.get("check_out_time"),
        duration_minutes=int(duration) if duration is not None else None,
        location=location,
    )


def _month_bounds(month: int, year: int) -> tuple[date, date]:
    last_day = calendar.monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), last_day)


class MySQLAttendanceRepository(AttendanceSessionStore):
    """Session store over MySQL.

    The one-open-session invariant is enforced by the ``uq_attendance_one_open``
    unique key; writes notify the in-process ``SessionFeed`` after commit.
    """

    def __init__(self, conn_factory: DatabaseConnection, *, feed: Optional[SessionFeed] = None):
        self._conn_factory = conn_factory
        self._feed = feed or SessionFeed()

    def create_session(
        self,
        *,
        employee_id: str,
        check_in_time: datetime,
        work_date: date,
        location: Optional[Coordinates] = None,
    ) -> int:
        with store_errors("create session", write=True, on_duplicate=OpenSessionConflict):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_sessions(employee_id, work_date, check_in_time, latitude, longitude)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (
                        str(employee_id),
                        work_date,
                        check_in_time,
                        location.latitude if location else None,
                        location.longitude if location else None,
                    ),
                )
                session_id = int(cur.lastrowid)

        self._feed.publish(employee_id)
        return session_id

    def update_session(self, *, session_id: int, check_out_time: datetime, duration_minutes: int) -> None:
        with store_errors("close session", write=True):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE attendance_sessions
                    SET check_out_time=%s, duration_minutes=%s
                    WHERE session_id=%s AND check_out_time IS NULL
                    """,
                    (check_out_time, int(duration_minutes), int(session_id)),
                )
                closed = cur.rowcount > 0

                cur.execute("SELECT employee_id FROM attendance_sessions WHERE session_id=%s", (int(session_id),))
                r = fetchone(cur)

        if r is None:
            raise StoreWriteError(f"Session {session_id} does not exist")
        if not closed:
            raise SessionAlreadyClosed(f"Session {session_id} is already closed")
        self._feed.publish(str(r["employee_id"]))

    def get_open_session(self, employee_id: str) -> Optional[AttendanceSession]:
        with store_errors("load open session"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_sessions
                WHERE employee_id=%s AND check_out_time IS NULL
                ORDER BY check_in_time DESC
                LIMIT 1
                """,
                (str(employee_id),),
            )
            r = fetchone(cur)
            return _row_to_session(r) if r else None

    def query_sessions(
        self,
        employee_id: str,
        *,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> Sequence[AttendanceSession]:
        clauses = ["employee_id=%s"]
        params: list[object] = [str(employee_id)]
        if month is not None and year is not None:
            start, end = _month_bounds(month, year)
            clauses.append("work_date BETWEEN %s AND %s")
            params.extend([start, end])

        where = " AND ".join(clauses)

        with store_errors("query sessions"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_sessions
                WHERE {where}
                ORDER BY check_in_time DESC
                """,
                tuple(params),
            )
            return [_row_to_session(r) for r in fetchall(cur)]

    def query_range(self, *, start: date, end: date) -> Sequence[AttendanceSession]:
        with store_errors("query sessions in range"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_sessions
                WHERE work_date BETWEEN %s AND %s
                ORDER BY employee_id ASC, check_in_time ASC
                """,
                (start, end),
            )
            return [_row_to_session(r) for r in fetchall(cur)]

    def subscribe_sessions(
        self,
        employee_id: str,
        on_update: SessionsCallback,
        on_error: Optional[ErrorCallback] = None,
        *,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> Unsubscribe:
        return self._feed.subscribe(
            employee_id,
            lambda: self.query_sessions(employee_id, month=month, year=year),
            on_update,
            on_error,
        )
