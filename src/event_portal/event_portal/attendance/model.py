from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import AttendanceStatus
from ..events.model import Event


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's outcome for one event.

    `status` never changes once created; only `penalty_paid` may flip to True.
    """

    record_id: str
    event_id: str
    student_id: str
    status: AttendanceStatus
    timestamp: Optional[datetime] = None
    penalty_paid: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.record_id,
            "event_id": self.event_id,
            "student_id": self.student_id,
            "status": self.status.value,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "penalty_paid": self.penalty_paid,
        }


@dataclass(frozen=True)
class EventAttendanceRow:
    """Read-model for the faculty roster: record joined with the student name."""

    record: AttendanceRecord
    student_name: str


@dataclass(frozen=True)
class OutstandingFine:
    """Read-model: an unpaid absence on a mandatory, positive-penalty event.

    `amount` is read from the event at query time; no snapshot is stored.
    """

    record: AttendanceRecord
    event: Event
    amount: Decimal


@dataclass(frozen=True)
class AttendanceSummary:
    present: int
    absent: int
    pending: int
    outstanding_total: Decimal
