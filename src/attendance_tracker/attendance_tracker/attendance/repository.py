from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Optional, Protocol, Sequence

from .model import AttendanceSession, Coordinates

SessionsCallback = Callable[[Sequence[AttendanceSession]], None]
ErrorCallback = Callable[[Exception], None]
Unsubscribe = Callable[[], None]


class AttendanceSessionStore(Protocol):
    """Append-only session records keyed by (employee, work date).

    Implementations raise StoreReadError / StoreWriteError and must reject a
    second open session for the same employee with OpenSessionConflict.
    """

    def create_session(
        self,
        *,
        employee_id: str,
        check_in_time: datetime,
        work_date: date,
        location: Optional[Coordinates] = None,
    ) -> int:
        raise NotImplementedError

    def update_session(self, *, session_id: int, check_out_time: datetime, duration_minutes: int) -> None:
        """Close an open session; SessionAlreadyClosed if it was closed meanwhile."""

        raise NotImplementedError

    def get_open_session(self, employee_id: str) -> Optional[AttendanceSession]:
        raise NotImplementedError

    def query_sessions(
        self,
        employee_id: str,
        *,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> Sequence[AttendanceSession]:
        raise NotImplementedError

    def query_range(self, *, start: date, end: date) -> Sequence[AttendanceSession]:
        """All employees' sessions with ``start <= work_date <= end``."""

        raise NotImplementedError

    def subscribe_sessions(
        self,
        employee_id: str,
        on_update: SessionsCallback,
        on_error: Optional[ErrorCallback] = None,
        *,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> Unsubscribe:
        """Push the full matching set now and after every write for the employee."""

        raise NotImplementedError
