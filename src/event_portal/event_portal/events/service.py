from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence

from ..attendance.service import AttendanceService
from ..common.datetime_utils import parse_iso_datetime, to_naive_utc
from ..common.ids import new_id, new_qr_token
from ..common.validators import parse_amount, require_max_length, require_non_empty
from ..core.constants import MAX_QR_TOKEN_ATTEMPTS, MAX_TITLE_LENGTH, MAX_VENUE_LENGTH, ZERO_AMOUNT
from ..core.enums import EventStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.service import UserService
from .model import Event
from .repository import EventRepository

logger = logging.getLogger(__name__)


class EventService:
    """Event catalog: publishing events and closing them out.

    Owns every write to Event.status. Finalizing delegates absence records
    to the AttendanceService, which owns the attendance ledger.
    """

    def __init__(self, events: EventRepository, users: UserService, attendance: AttendanceService):
        self._events = events
        self._users = users
        self._attendance = attendance

    def list_events(self) -> Sequence[Event]:
        return list(self._events.list_all())

    def list_for_faculty(self, created_by: str) -> Sequence[Event]:
        return sorted(self._events.list_by_creator(created_by), key=lambda e: e.start_time, reverse=True)

    def list_upcoming(self) -> Sequence[Event]:
        upcoming = [e for e in self._events.list_all() if e.status == EventStatus.UPCOMING]
        return sorted(upcoming, key=lambda e: e.start_time)

    def get_event(self, event_id: str) -> Event:
        event = self._events.get_by_id(event_id)
        if not event:
            raise NotFoundError("Event not found")
        return event

    def get_by_qr_token(self, qr_token: str) -> Event:
        event = self._events.get_by_qr_token((qr_token or "").strip())
        if not event:
            raise NotFoundError("QR code does not match any event")
        return event

    def create_event(
        self,
        *,
        current_role: Role,
        created_by: str,
        title: str,
        description: str,
        start_time: datetime | str,
        venue: str,
        is_required: bool,
        penalty_amount=ZERO_AMOUNT,
    ) -> Event:
        if current_role != Role.FACULTY:
            raise AuthorizationError("Only faculty can create events")
        if not self._users.is_faculty(created_by):
            raise ValidationError("Event owner must be a faculty account")

        title = require_max_length(require_non_empty(title, "Title"), "Title", MAX_TITLE_LENGTH)
        venue = require_max_length(require_non_empty(venue, "Venue"), "Venue", MAX_VENUE_LENGTH)
        if isinstance(start_time, datetime):
            start = to_naive_utc(start_time)
        else:
            start = to_naive_utc(parse_iso_datetime(start_time))

        # validated even when the event is optional, then zeroed
        penalty = parse_amount(penalty_amount)
        is_required = bool(is_required)
        if not is_required:
            penalty = ZERO_AMOUNT

        for _ in range(MAX_QR_TOKEN_ATTEMPTS):
            token = new_qr_token()
            if self._events.get_by_qr_token(token):
                continue
            event = Event(
                event_id=new_id(),
                title=title,
                description=(description or "").strip(),
                start_time=start,
                venue=venue,
                created_by=created_by,
                is_required=is_required,
                penalty_amount=penalty,
                qr_code_data=token,
                status=EventStatus.UPCOMING,
            )
            if self._events.create_event(event):
                logger.info(
                    "Event %s created by %s (required=%s, penalty=%s)",
                    event.event_id, created_by, is_required, penalty,
                )
                return event

        raise RuntimeError("Could not allocate a unique QR token")

    def finalize(self, event_id: str, *, current_role: Role, user_id: str) -> int:
        """Close an event and synthesize absences for a mandatory one.

        Only an `upcoming` event is processed; finalizing a completed event
        is a no-op. Returns the number of absence records created.
        """

        event = self.get_event(event_id)
        if current_role != Role.FACULTY:
            raise AuthorizationError("Only faculty can finalize events")
        if event.created_by != user_id:
            raise AuthorizationError("Only the event owner can finalize it")

        if event.status != EventStatus.UPCOMING:
            logger.info("Event %s already %s, finalize skipped", event_id, event.status.value)
            return 0

        created = 0
        if event.is_required:
            student_ids = [s.user_id for s in self._users.list_students()]
            created = self._attendance.synthesize_absences(event_id, student_ids)

        if self._events.mark_completed(event_id):
            logger.info("Event %s finalized, %d absence record(s) created", event_id, created)
        else:
            logger.info("Event %s was finalized concurrently", event_id)
        return created
