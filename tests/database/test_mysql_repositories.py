from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest
from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from src.event_portal.event_portal.attendance.model import AttendanceRecord
from src.event_portal.event_portal.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from src.event_portal.event_portal.core.enums import AttendanceStatus, EventStatus, Role
from src.event_portal.event_portal.events.model import Event
from src.event_portal.event_portal.events.mysql_event_repository import MySQLEventRepository
from src.event_portal.event_portal.users.model import User
from src.event_portal.event_portal.users.mysql_user_repository import MySQLUserRepository


class FakeCursor:
    def __init__(self, rowcounts, rows, error=None):
        self._rowcounts = list(rowcounts)
        self._rows = list(rows)
        self._error = error
        self.executed = []
        self.rowcount = 0

    def execute(self, sql, params=None):
        self.executed.append((" ".join(sql.split()), params))
        if self._error is not None:
            raise self._error
        self.rowcount = self._rowcounts.pop(0) if self._rowcounts else 0

    def fetchone(self):
        return self._rows.pop(0) if self._rows else None

    def fetchall(self):
        rows, self._rows = self._rows, []
        return rows

    def close(self):
        pass


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


class FakeConnFactory:
    def __init__(self, cursor):
        self.conn = FakeConnection(cursor)

    def connect(self):
        return self.conn


def _record(record_id="new", status=AttendanceStatus.PRESENT):
    return AttendanceRecord(
        record_id=record_id,
        event_id="e1",
        student_id="s1",
        status=status,
        timestamp=datetime(2026, 3, 2, 8, 0),
    )


def test_create_if_absent_inserts_new_record():
    cur = FakeCursor(rowcounts=[1], rows=[])
    factory = FakeConnFactory(cur)

    stored, created = MySQLAttendanceRepository(factory).create_if_absent(_record())

    assert created is True
    assert stored.record_id == "new"
    assert cur.executed[0][0].startswith("INSERT IGNORE INTO attendance_records")
    assert factory.conn.committed


def test_create_if_absent_returns_existing_on_duplicate():
    existing = {
        "record_id": "old",
        "event_id": "e1",
        "student_id": "s1",
        "status": "absent",
        "timestamp": datetime(2026, 3, 1, 10, 0),
        "penalty_paid": 0,
    }
    cur = FakeCursor(rowcounts=[0, 1], rows=[existing])

    stored, created = MySQLAttendanceRepository(FakeConnFactory(cur)).create_if_absent(_record())

    assert created is False
    assert stored.record_id == "old"
    assert stored.status == AttendanceStatus.ABSENT
    assert stored.penalty_paid is False


def test_mark_completed_is_conditional_on_upcoming():
    cur = FakeCursor(rowcounts=[0], rows=[])

    assert MySQLEventRepository(FakeConnFactory(cur)).mark_completed("e1") is False
    sql, params = cur.executed[0]
    assert "WHERE event_id=%s AND status=%s" in sql
    assert params == ("completed", "e1", "upcoming")


def _event():
    return Event(
        event_id="e1",
        title="Assembly",
        description="",
        start_time=datetime(2026, 3, 5, 9, 0),
        venue="Gym",
        created_by="fac-1",
        is_required=True,
        penalty_amount=Decimal("150.00"),
        qr_code_data="tok",
        status=EventStatus.UPCOMING,
    )


def test_create_event_uses_plain_insert():
    cur = FakeCursor(rowcounts=[1], rows=[])

    assert MySQLEventRepository(FakeConnFactory(cur)).create_event(_event()) is True
    assert cur.executed[0][0].startswith("INSERT INTO events")


def test_create_event_duplicate_token_returns_false():
    err = IntegrityError(msg="Duplicate entry 'tok' for key 'uq_events_qr'", errno=errorcode.ER_DUP_ENTRY)
    factory = FakeConnFactory(FakeCursor(rowcounts=[], rows=[], error=err))

    assert MySQLEventRepository(factory).create_event(_event()) is False
    assert factory.conn.rolled_back


def test_create_event_other_integrity_errors_propagate():
    err = IntegrityError(msg="Cannot add or update a child row", errno=errorcode.ER_NO_REFERENCED_ROW_2)
    factory = FakeConnFactory(FakeCursor(rowcounts=[], rows=[], error=err))

    with pytest.raises(IntegrityError):
        MySQLEventRepository(factory).create_event(_event())


def test_create_user_duplicate_email_returns_false():
    user = User(user_id="u1", name="Ana", email="ana@example.edu", role=Role.STUDENT)
    err = IntegrityError(msg="Duplicate entry for key 'uq_users_email'", errno=errorcode.ER_DUP_ENTRY)
    cur = FakeCursor(rowcounts=[], rows=[], error=err)

    assert MySQLUserRepository(FakeConnFactory(cur)).create_user(user) is False
    assert cur.executed[0][0].startswith("INSERT INTO users")
