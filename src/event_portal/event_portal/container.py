from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import now_utc
from .database.connection import DBConfig, DatabaseConnection
from .events.mysql_event_repository import MySQLEventRepository
from .events.repository import EventRepository
from .events.service import EventService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService
from .users.session import FlaskSessionStore, SessionStore


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    events_repo: EventRepository
    attendance_repo: AttendanceRepository
    sessions: SessionStore

    auth_service: AuthService
    user_service: UserService
    attendance_service: AttendanceService
    event_service: EventService

    conn: Optional[DatabaseConnection] = None


def assemble(
    *,
    users_repo: UserRepository,
    events_repo: EventRepository,
    attendance_repo: AttendanceRepository,
    sessions: SessionStore,
    conn: Optional[DatabaseConnection] = None,
    clock: Callable[[], datetime] = now_utc,
) -> Container:
    """Wire services over the given repositories (built once per process)."""

    auth_service = AuthService(users_repo, sessions)
    user_service = UserService(users_repo)
    attendance_service = AttendanceService(attendance_repo, events_repo, user_service, clock=clock)
    event_service = EventService(events_repo, user_service, attendance_service)

    return Container(
        users_repo=users_repo,
        events_repo=events_repo,
        attendance_repo=attendance_repo,
        sessions=sessions,
        auth_service=auth_service,
        user_service=user_service,
        attendance_service=attendance_service,
        event_service=event_service,
        conn=conn,
    )


def build_container(*, db_config: dict, sessions: Optional[SessionStore] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble(
        users_repo=MySQLUserRepository(conn),
        events_repo=MySQLEventRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        sessions=sessions or FlaskSessionStore(),
        conn=conn,
    )
