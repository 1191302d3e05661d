from __future__ import annotations

from typing import Optional, Protocol, Sequence, Tuple

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_student(self, student_id: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_event(self, event_id: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create_if_absent(self, record: AttendanceRecord) -> Tuple[AttendanceRecord, bool]:
        """Atomic upsert-if-absent keyed on (event_id, student_id).

        Returns (stored record, created). When a record already exists for
        the pair it is returned unchanged and `record` is discarded.
        """

        raise NotImplementedError

    def mark_paid(self, record_id: str) -> bool:
        raise NotImplementedError
