from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Optional

import pytest

from src.event_portal.event_portal.attendance.model import AttendanceRecord
from src.event_portal.event_portal.container import assemble
from src.event_portal.event_portal.core.enums import EventStatus, Role
from src.event_portal.event_portal.events.model import Event
from src.event_portal.event_portal.users.model import User
from src.event_portal.event_portal.users.session import InMemorySessionStore


class InMemoryUsers:
    def __init__(self):
        self.by_id: dict[str, User] = {}

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self.by_id.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self.by_id.values() if u.email == email), None)

    def list_by_role(self, role: Role):
        return [u for u in self.by_id.values() if u.role == role]

    def create_user(self, user: User) -> bool:
        if self.get_by_email(user.email):
            return False
        self.by_id[user.user_id] = user
        return True


class InMemoryEvents:
    def __init__(self):
        self.by_id: dict[str, Event] = {}

    def get_by_id(self, event_id: str) -> Optional[Event]:
        return self.by_id.get(event_id)

    def get_by_qr_token(self, qr_code_data: str) -> Optional[Event]:
        return next((e for e in self.by_id.values() if e.qr_code_data == qr_code_data), None)

    def get_by_ids(self, event_ids):
        return {i: self.by_id[i] for i in set(event_ids) if i in self.by_id}

    def list_all(self):
        return list(self.by_id.values())

    def list_by_creator(self, created_by: str):
        return [e for e in self.by_id.values() if e.created_by == created_by]

    def create_event(self, event: Event) -> bool:
        if self.get_by_qr_token(event.qr_code_data):
            return False
        self.by_id[event.event_id] = event
        return True

    def mark_completed(self, event_id: str) -> bool:
        event = self.by_id.get(event_id)
        if not event or event.status != EventStatus.UPCOMING:
            return False
        self.by_id[event_id] = replace(event, status=EventStatus.COMPLETED)
        return True

    def set_penalty(self, event_id: str, amount: Decimal) -> None:
        self.by_id[event_id] = replace(self.by_id[event_id], penalty_amount=amount)


class InMemoryAttendance:
    def __init__(self):
        self.by_id: dict[str, AttendanceRecord] = {}
        self._by_pair: dict[tuple[str, str], str] = {}

    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        return self.by_id.get(record_id)

    def get_for_event_and_student(self, event_id: str, student_id: str) -> Optional[AttendanceRecord]:
        record_id = self._by_pair.get((event_id, student_id))
        return self.by_id.get(record_id) if record_id else None

    def list_for_student(self, student_id: str):
        return [r for r in self.by_id.values() if r.student_id == student_id]

    def list_for_event(self, event_id: str):
        return [r for r in self.by_id.values() if r.event_id == event_id]

    def create_if_absent(self, record: AttendanceRecord):
        existing = self.get_for_event_and_student(record.event_id, record.student_id)
        if existing:
            return existing, False
        self.by_id[record.record_id] = record
        self._by_pair[(record.event_id, record.student_id)] = record.record_id
        return record, True

    def mark_paid(self, record_id: str) -> bool:
        record = self.by_id.get(record_id)
        if not record or record.penalty_paid:
            return False
        self.by_id[record_id] = replace(record, penalty_paid=True)
        return True


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 8, 0, 0)


@pytest.fixture
def users_repo() -> InMemoryUsers:
    return InMemoryUsers()


@pytest.fixture
def events_repo() -> InMemoryEvents:
    return InMemoryEvents()


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def sessions() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def container(users_repo, events_repo, attendance_repo, sessions, fixed_now):
    return assemble(
        users_repo=users_repo,
        events_repo=events_repo,
        attendance_repo=attendance_repo,
        sessions=sessions,
        clock=lambda: fixed_now,
    )


def _add_user(repo: InMemoryUsers, user_id: str, name: str, role: Role) -> User:
    user = User(user_id=user_id, name=name, email=f"{user_id}@campus.edu", role=role)
    repo.create_user(user)
    return user


@pytest.fixture
def faculty(users_repo) -> User:
    return _add_user(users_repo, "fac-1", "Faculty F", Role.FACULTY)


@pytest.fixture
def students(users_repo) -> list[User]:
    return [
        _add_user(users_repo, "stu-a", "Student A", Role.STUDENT),
        _add_user(users_repo, "stu-b", "Student B", Role.STUDENT),
        _add_user(users_repo, "stu-c", "Student C", Role.STUDENT),
    ]


@pytest.fixture
def make_event(container, faculty):
    def _make(**overrides) -> Event:
        fields = dict(
            current_role=Role.FACULTY,
            created_by=faculty.user_id,
            title="Assembly",
            description="General assembly",
            start_time="2026-03-05T09:00:00",
            venue="Gym",
            is_required=True,
            penalty_amount="150.00",
        )
        fields.update(overrides)
        return container.event_service.create_event(**fields)

    return _make
