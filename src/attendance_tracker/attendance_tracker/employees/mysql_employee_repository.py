from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time, store_errors
from .defaults import default_working_hours
from .model import Employee, WorkingHoursSchedule
from .repository import EmployeeRepository

_COLUMNS = """
    employee_id, name, email, role, start_time, end_time, working_days,
    total_hours_per_day, total_hours_per_week, is_active
"""


def _parse_working_days(value: Optional[str]) -> frozenset[str]:
    if not value:
        return frozenset()
    return frozenset(part.strip() for part in value.split(",") if part.strip())


def _row_to_employee(r: Dict[str, Any]) -> Employee:
    role = Role(r["role"])
    start = normalize_mysql_time(r.get("start_time"))
    end = normalize_mysql_time(r.get("end_time"))

    if start is None or end is None:
        schedule = default_working_hours(role)
    else:
        schedule = WorkingHoursSchedule(
            start_time=start,
            end_time=end,
            working_days=_parse_working_days(r.get("working_days")),
            total_hours_per_day=float(r.get("total_hours_per_day") or 0),
            total_hours_per_week=float(r.get("total_hours_per_week") or 0),
        )

    return Employee(
        employee_id=str(r["employee_id"]),
        name=r["name"],
        email=r["email"],
        role=role,
        schedule=schedule,
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        with store_errors("load employee"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (str(employee_id),))
            r = fetchone(cur)
            return _row_to_employee(r) if r else None

    def list_active(self) -> Sequence[Employee]:
        with store_errors("list employees"), db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE is_active=1 ORDER BY name ASC")
            return [_row_to_employee(r) for r in fetchall(cur)]
