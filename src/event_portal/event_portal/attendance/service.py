from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterable, Sequence

from ..common.datetime_utils import now_utc
from ..common.ids import new_id
from ..core.constants import UNKNOWN_STUDENT_NAME, ZERO_AMOUNT
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..events.repository import EventRepository
from ..users.service import UserService
from .model import AttendanceRecord, AttendanceSummary, EventAttendanceRow, OutstandingFine
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Attendance ledger: check-ins, absence synthesis and fine settlement.

    At most one record exists per (event, student). Every creation goes
    through the repository's atomic `create_if_absent`, so a repeated scan
    or a check-in racing a finalize can never produce a second record.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        events: EventRepository,
        users: UserService,
        *,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._attendance = attendance
        self._events = events
        self._users = users
        self._clock = clock

    def _new_record(self, event_id: str, student_id: str, status: AttendanceStatus) -> AttendanceRecord:
        return AttendanceRecord(
            record_id=new_id(),
            event_id=event_id,
            student_id=student_id,
            status=status,
            timestamp=self._clock(),
            penalty_paid=False,
        )

    def check_in(self, event_id: str, student_id: str, *, current_role: Role) -> AttendanceRecord:
        """Record the student as present. Repeated scans return the existing record."""

        if current_role != Role.STUDENT:
            raise AuthorizationError("Only students can check in")
        if not self._events.get_by_id(event_id):
            raise NotFoundError("Event not found")

        record, created = self._attendance.create_if_absent(
            self._new_record(event_id, student_id, AttendanceStatus.PRESENT)
        )
        if created:
            logger.info("Student %s checked in to event %s", student_id, event_id)
        return record

    def check_in_with_token(self, qr_token: str, student_id: str, *, current_role: Role) -> AttendanceRecord:
        token = (qr_token or "").strip()
        if not token:
            raise ValidationError("QR code is required")
        event = self._events.get_by_qr_token(token)
        if not event:
            raise NotFoundError("QR code does not match any event")
        return self.check_in(event.event_id, student_id, current_role=current_role)

    def synthesize_absences(self, event_id: str, student_ids: Iterable[str]) -> int:
        """Create an absent record for every listed student without one.

        Students that already have a record (present or absent) are skipped,
        so overlapping or repeated calls are safe. Returns the number created.
        """

        created = 0
        for student_id in dict.fromkeys(student_ids):
            _, was_created = self._attendance.create_if_absent(
                self._new_record(event_id, student_id, AttendanceStatus.ABSENT)
            )
            if was_created:
                created += 1
        return created

    def records_for_student(self, student_id: str) -> Sequence[AttendanceRecord]:
        return list(self._attendance.list_for_student(student_id))

    def records_for_event(self, event_id: str) -> Sequence[EventAttendanceRow]:
        rows = []
        for record in self._attendance.list_for_event(event_id):
            student = self._users.get_user(record.student_id)
            name = student.name if student else UNKNOWN_STUDENT_NAME
            rows.append(EventAttendanceRow(record=record, student_name=name))
        return rows

    def settle_fine(self, record_id: str, *, current_role: Role, user_id: str) -> AttendanceRecord:
        """Mark a fine as paid. Paying twice is a no-op; there is no refund.

        Only an absence from a required event with a positive penalty carries
        a fine; settling any other record raises ValidationError.
        """

        record = self._attendance.get_by_id(record_id)
        if not record:
            raise NotFoundError("Attendance record not found")
        if current_role == Role.STUDENT and record.student_id != user_id:
            raise AuthorizationError("You can only pay your own fines")

        if record.penalty_paid:
            return record

        event = self._events.get_by_id(record.event_id)
        if record.status != AttendanceStatus.ABSENT or not event or not event.is_fineable:
            raise ValidationError("This record has no fine to settle")

        if self._attendance.mark_paid(record_id):
            logger.info("Fine on record %s settled by %s", record_id, user_id)
        return self._attendance.get_by_id(record_id) or record

    def outstanding_fines(self, student_id: str) -> Sequence[OutstandingFine]:
        absences = [
            r
            for r in self._attendance.list_for_student(student_id)
            if r.status == AttendanceStatus.ABSENT and not r.penalty_paid
        ]
        if not absences:
            return []

        events = self._events.get_by_ids(r.event_id for r in absences)
        fines = []
        for record in absences:
            event = events.get(record.event_id)
            if event and event.is_fineable:
                fines.append(OutstandingFine(record=record, event=event, amount=event.effective_penalty))
        return fines

    def attendance_summary(self, student_id: str) -> AttendanceSummary:
        records = self._attendance.list_for_student(student_id)
        counts = {status: 0 for status in AttendanceStatus}
        for r in records:
            counts[r.status] += 1
        total = sum((f.amount for f in self.outstanding_fines(student_id)), ZERO_AMOUNT)
        return AttendanceSummary(
            present=counts[AttendanceStatus.PRESENT],
            absent=counts[AttendanceStatus.ABSENT],
            pending=counts[AttendanceStatus.PENDING],
            outstanding_total=total,
        )
