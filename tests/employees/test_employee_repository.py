from __future__ import annotations

from datetime import time, timedelta

from src.attendance_tracker.attendance_tracker.core.enums import Role
from src.attendance_tracker.attendance_tracker.employees.mysql_employee_repository import MySQLEmployeeRepository
from tests.fakes import FakeConnFactory, FakeConnection


def _row(**overrides):
    row = {
        "employee_id": "emp-1",
        "name": "Asha",
        "email": "asha@example.com",
        "role": "employee",
        "start_time": timedelta(hours=9),
        "end_time": timedelta(hours=18),
        "working_days": "Monday, Tuesday,Wednesday",
        "total_hours_per_day": 9,
        "total_hours_per_week": 27,
        "is_active": 1,
    }
    row.update(overrides)
    return row


def test_schedule_columns_are_mapped():
    repo = MySQLEmployeeRepository(FakeConnFactory(FakeConnection(rows=[_row()])))

    employee = repo.get_by_id("emp-1")

    assert employee.role == Role.EMPLOYEE
    assert employee.schedule.start_time == time(9, 0)
    assert employee.schedule.working_days == frozenset({"Monday", "Tuesday", "Wednesday"})
    assert employee.schedule.total_hours_per_day == 9.0
    assert not employee.schedule.works_on("Friday")


def test_missing_schedule_falls_back_to_role_template():
    conn = FakeConnection(rows=[_row(role="intern", start_time=None, end_time=None, working_days=None)])

    employee = MySQLEmployeeRepository(FakeConnFactory(conn)).get_by_id("emp-1")

    assert employee.schedule.start_time == time(10, 0)
    assert employee.schedule.total_hours_per_day == 6.0
    assert employee.schedule.works_on("Friday")


def test_unknown_employee():
    repo = MySQLEmployeeRepository(FakeConnFactory(FakeConnection(rows=[])))

    assert repo.get_by_id("nobody") is None
