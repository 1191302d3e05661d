from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for authorization."""

    STUDENT = "student"
    FACULTY = "faculty"


class EventStatus(str, Enum):
    """Event lifecycle.

    ONGOING is reserved: no transition in the service enters it yet.
    """

    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    PENDING = "pending"
