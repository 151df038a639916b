from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role claim issued by the external identity provider."""

    ADMIN = "admin"
    EMPLOYEE = "employee"
    INTERN = "intern"


class ProgressStatus(str, Enum):
    """How far a day's actual hours are from the scheduled target."""

    COMPLETED = "Completed"
    ON_TRACK = "On Track"
    BEHIND = "Behind"
    FAR_BEHIND = "Far Behind"


class DayType(str, Enum):
    FULL = "full"
    HALF = "half"
    ABSENT = "absent"


class DayAttendance(str, Enum):
    """Classification of a scheduled working day in range reports."""

    PRESENT = "present"
    HALF_DAY = "half-day"
    ABSENT = "absent"


class LeaveStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class MessageKind(str, Enum):
    DIRECT = "direct"
    BROADCAST = "broadcast"
