from __future__ import annotations

from datetime import datetime

import pytest

from src.attendance_tracker.attendance_tracker.core.enums import Role
from src.attendance_tracker.attendance_tracker.employees.model import Employee
from tests.fakes import (
    FakeClock,
    InMemoryEmployees,
    InMemoryLeaves,
    InMemoryMessages,
    InMemorySessionStore,
    office_schedule,
)


@pytest.fixture
def clock() -> FakeClock:
    # Monday
    return FakeClock(datetime(2026, 3, 2, 9, 0, 0))


@pytest.fixture
def store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def employees() -> InMemoryEmployees:
    return InMemoryEmployees(
        [
            Employee(employee_id="emp-1", name="Asha", email="asha@example.com", role=Role.EMPLOYEE, schedule=office_schedule()),
            Employee(employee_id="adm-1", name="Ravi", email="ravi@example.com", role=Role.ADMIN, schedule=office_schedule(8.5)),
        ]
    )


@pytest.fixture
def leaves() -> InMemoryLeaves:
    return InMemoryLeaves()


@pytest.fixture
def messages() -> InMemoryMessages:
    return InMemoryMessages()
