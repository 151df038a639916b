from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time, timedelta
from typing import Optional

from src.attendance_tracker.attendance_tracker.attendance.feed import SessionFeed
from src.attendance_tracker.attendance_tracker.attendance.model import AttendanceSession, Coordinates
from src.attendance_tracker.attendance_tracker.core.enums import LeaveStatus
from src.attendance_tracker.attendance_tracker.core.exceptions import (
    OpenSessionConflict,
    SessionAlreadyClosed,
    StoreReadError,
    StoreWriteError,
)
from src.attendance_tracker.attendance_tracker.employees.model import Employee, WorkingHoursSchedule
from src.attendance_tracker.attendance_tracker.leaves.model import LeaveRequest
from src.attendance_tracker.attendance_tracker.messages.model import Message

WEEKDAYS = frozenset({"Monday", "Tuesday", "Wednesday", "Thursday", "Friday"})


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class InMemorySessionStore:
    """Session store double that enforces the one-open-session rule like the DB does.

    Passing the same ``sessions`` dict to two stores models two app processes
    sharing one database, each with its own in-process feed.
    """

    def __init__(self, sessions: Optional[dict] = None):
        self.sessions: dict[int, AttendanceSession] = {} if sessions is None else sessions
        self.feed = SessionFeed()
        self.created: list[int] = []
        self.updates: list[dict] = []
        self.open_queries = 0
        self.fail_reads = False
        self.fail_writes = False

    def add(self, session: AttendanceSession) -> AttendanceSession:
        self.sessions[session.session_id] = session
        return session

    def create_session(self, *, employee_id, check_in_time, work_date, location=None) -> int:
        if self.fail_writes:
            raise StoreWriteError("network down")
        if any(s.employee_id == employee_id and s.is_open for s in self.sessions.values()):
            raise OpenSessionConflict("duplicate open session")
        session_id = max(self.sessions, default=0) + 1
        self.sessions[session_id] = AttendanceSession(
            session_id=session_id,
            employee_id=employee_id,
            work_date=work_date,
            check_in_time=check_in_time,
            location=location,
        )
        self.created.append(session_id)
        self.feed.publish(employee_id)
        return session_id

    def update_session(self, *, session_id, check_out_time, duration_minutes) -> None:
        if self.fail_writes:
            raise StoreWriteError("network down")
        if session_id not in self.sessions:
            raise StoreWriteError(f"Session {session_id} does not exist")
        current = self.sessions[session_id]
        if not current.is_open:
            raise SessionAlreadyClosed(f"Session {session_id} is already closed")
        self.sessions[session_id] = replace(current, check_out_time=check_out_time, duration_minutes=duration_minutes)
        self.updates.append(
            {"session_id": session_id, "check_out_time": check_out_time, "duration_minutes": duration_minutes}
        )
        self.feed.publish(current.employee_id)

    def get_open_session(self, employee_id) -> Optional[AttendanceSession]:
        self.open_queries += 1
        if self.fail_reads:
            raise StoreReadError("network down")
        for s in self.sessions.values():
            if s.employee_id == employee_id and s.is_open:
                return s
        return None

    def query_sessions(self, employee_id, *, month=None, year=None):
        if self.fail_reads:
            raise StoreReadError("network down")
        rows = [s for s in self.sessions.values() if s.employee_id == employee_id]
        if month is not None and year is not None:
            rows = [s for s in rows if s.work_date.month == month and s.work_date.year == year]
        return sorted(rows, key=lambda s: s.check_in_time, reverse=True)

    def query_range(self, *, start: date, end: date):
        if self.fail_reads:
            raise StoreReadError("network down")
        return [s for s in self.sessions.values() if start <= s.work_date <= end]

    def subscribe_sessions(self, employee_id, on_update, on_error=None, *, month=None, year=None):
        return self.feed.subscribe(
            employee_id,
            lambda: self.query_sessions(employee_id, month=month, year=year),
            on_update,
            on_error,
        )


class InMemoryEmployees:
    def __init__(self, employees: list[Employee]):
        self._by_id = {e.employee_id: e for e in employees}

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        return self._by_id.get(employee_id)

    def list_active(self):
        return [e for e in self._by_id.values() if e.is_active]


class InMemoryLeaves:
    def __init__(self):
        self.requests: dict[int, LeaveRequest] = {}
        self._next_id = 0

    def create(self, *, employee_id, start_date, end_date, reason, description, requested_at) -> int:
        self._next_id += 1
        self.requests[self._next_id] = LeaveRequest(
            request_id=self._next_id,
            employee_id=employee_id,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            description=description,
            status=LeaveStatus.PENDING,
            requested_at=requested_at,
        )
        return self._next_id

    def get(self, *, request_id):
        return self.requests.get(int(request_id))

    def list_requests(self, *, status=None, employee_id=None, limit=200):
        rows = list(self.requests.values())
        if status is not None:
            rows = [r for r in rows if r.status == status]
        if employee_id is not None:
            rows = [r for r in rows if r.employee_id == employee_id]
        return rows[:limit]

    def decide(self, *, request_id, status, decided_by, decided_at, admin_note=None) -> bool:
        req = self.requests.get(int(request_id))
        if not req or req.status != LeaveStatus.PENDING:
            return False
        self.requests[int(request_id)] = replace(
            req,
            status=status,
            responded_by=decided_by,
            responded_at=decided_at,
            admin_note=admin_note,
        )
        return True


class InMemoryMessages:
    def __init__(self):
        self.messages: dict[int, Message] = {}
        self._next_id = 0

    def create_many(self, *, sender_id, sender_name, recipients, content, kind, sent_at) -> int:
        for r in recipients:
            self._next_id += 1
            self.messages[self._next_id] = Message(
                message_id=self._next_id,
                sender_id=sender_id,
                sender_name=sender_name,
                recipient_id=r.employee_id,
                recipient_name=r.name,
                content=content,
                kind=kind,
                sent_at=sent_at,
            )
        return len(recipients)

    def get(self, *, message_id):
        return self.messages.get(int(message_id))

    def list_for_recipient(self, *, recipient_id, limit=200):
        rows = [m for m in self.messages.values() if m.recipient_id == recipient_id]
        return sorted(rows, key=lambda m: (m.sent_at, m.message_id), reverse=True)[:limit]

    def list_sent(self, *, limit=200):
        return sorted(self.messages.values(), key=lambda m: (m.sent_at, m.message_id), reverse=True)[:limit]

    def count_unread(self, *, recipient_id) -> int:
        return sum(1 for m in self.messages.values() if m.recipient_id == recipient_id and not m.is_read)

    def mark_read(self, *, message_id, recipient_id) -> bool:
        msg = self.messages.get(int(message_id))
        if msg is None or msg.recipient_id != recipient_id:
            return False
        self.messages[msg.message_id] = replace(msg, is_read=True)
        return True


def make_session(
    session_id: int,
    *,
    employee_id: str = "emp-1",
    check_in: datetime,
    check_out: Optional[datetime] = None,
    duration: Optional[int] = None,
    location: Optional[Coordinates] = None,
) -> AttendanceSession:
    if check_out is not None and duration is None:
        duration = max(int((check_out - check_in).total_seconds() // 60), 0)
    return AttendanceSession(
        session_id=session_id,
        employee_id=employee_id,
        work_date=check_in.date(),
        check_in_time=check_in,
        check_out_time=check_out,
        duration_minutes=duration,
        location=location,
    )


def office_schedule(hours_per_day: float = 8.0) -> WorkingHoursSchedule:
    return WorkingHoursSchedule(
        start_time=time(9, 0),
        end_time=time(17, 0),
        working_days=WEEKDAYS,
        total_hours_per_day=hours_per_day,
        total_hours_per_week=hours_per_day * 5,
    )


class FakeCursor:
    def __init__(self, conn):
        self._conn = conn
        self.lastrowid = None
        self.rowcount = 0
        self._rows = []

    def execute(self, sql, params=()):
        self._conn.executed.append((" ".join(sql.split()), params))
        if self._conn.error is not None:
            raise self._conn.error
        self.lastrowid = self._conn.lastrowid
        self.rowcount = self._conn.rowcount
        self._rows = list(self._conn.rows)

    def executemany(self, sql, seq_params):
        params = list(seq_params)
        self._conn.executed.append((" ".join(sql.split()), params))
        if self._conn.error is not None:
            raise self._conn.error
        self.rowcount = len(params)

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def fetchall(self):
        return self._rows

    def close(self):
        pass


class FakeConnection:
    def __init__(self, *, rows=(), lastrowid=1, rowcount=1, error=None):
        self.rows = rows
        self.lastrowid = lastrowid
        self.rowcount = rowcount
        self.error = error
        self.executed = []
        self.committed = False
        self.rolled_back = False

    def cursor(self, dictionary=True):
        return FakeCursor(self)

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


class FakeConnFactory:
    def __init__(self, conn: FakeConnection):
        self.conn = conn

    def connect(self):
        return self.conn
