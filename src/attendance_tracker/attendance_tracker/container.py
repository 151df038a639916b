from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .attendance.evaluator import ScheduleEvaluator
from .attendance.feed import SessionFeed
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceSessionStore
from .attendance.service import TrackerRegistry
from .common.datetime_utils import now_local
from .core.constants import DEFAULT_FULL_DAY_HOURS, DEFAULT_GEOLOCATION_TIMEOUT_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.service import LeaveService
from .messages.mysql_message_repository import MySQLMessageRepository
from .messages.repository import MessageRepository
from .messages.service import MessageService
from .reports.service import AttendanceReportService


@dataclass(frozen=True)
class Container:
    employees_repo: EmployeeRepository
    attendance_repo: AttendanceSessionStore
    leaves_repo: LeaveRepository
    messages_repo: MessageRepository

    trackers: TrackerRegistry
    report_service: AttendanceReportService
    leave_service: LeaveService
    message_service: MessageService

    clock: Callable[[], datetime] = now_local
    conn: Optional[DatabaseConnection] = None


def build_services(
    *,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceSessionStore,
    leaves_repo: LeaveRepository,
    messages_repo: MessageRepository,
    geolocation_timeout: float = DEFAULT_GEOLOCATION_TIMEOUT_SECONDS,
    full_day_hours: float = DEFAULT_FULL_DAY_HOURS,
    clock: Callable[[], datetime] = now_local,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    evaluator = ScheduleEvaluator(full_day_hours=full_day_hours)
    trackers = TrackerRegistry(
        attendance_repo,
        geolocation_timeout=geolocation_timeout,
        evaluator=evaluator,
        clock=clock,
    )
    report_service = AttendanceReportService(attendance_repo, employees_repo, clock=clock)
    leave_service = LeaveService(leaves_repo, clock=clock)
    message_service = MessageService(messages_repo, employees_repo, clock=clock)

    return Container(
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        messages_repo=messages_repo,
        trackers=trackers,
        report_service=report_service,
        leave_service=leave_service,
        message_service=message_service,
        clock=clock,
        conn=conn,
    )


def build_container(
    *,
    db_config: dict,
    geolocation_timeout: float = DEFAULT_GEOLOCATION_TIMEOUT_SECONDS,
    full_day_hours: float = DEFAULT_FULL_DAY_HOURS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return build_services(
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn, feed=SessionFeed()),
        leaves_repo=MySQLLeaveRepository(conn),
        messages_repo=MySQLMessageRepository(conn),
        geolocation_timeout=geolocation_timeout,
        full_day_hours=full_day_hours,
        conn=conn,
    )
