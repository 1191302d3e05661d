from __future__ import annotations

from typing import Optional, Sequence, Tuple

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_bool
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "record_id, event_id, student_id, status, timestamp, penalty_paid"


def _to_record(row: dict) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=str(row["record_id"]),
        event_id=str(row["event_id"]),
        student_id=str(row["student_id"]),
        status=AttendanceStatus(row["status"]),
        timestamp=row.get("timestamp"),
        penalty_paid=to_bool(row.get("penalty_paid")),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE record_id=%s", (record_id,))
            row = fetchone(cur)
            return _to_record(row) if row else None

    def list_for_student(self, student_id: str) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE student_id=%s ORDER BY timestamp DESC",
                (student_id,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_event(self, event_id: str) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE event_id=%s ORDER BY timestamp ASC",
                (event_id,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create_if_absent(self, record: AttendanceRecord) -> Tuple[AttendanceRecord, bool]:
        # uq_attendance_event_student turns a duplicate into a silent no-op,
        # so the insert and the re-read share one transaction.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT IGNORE INTO attendance_records(record_id, event_id, student_id, status, timestamp, penalty_paid)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    record.record_id,
                    record.event_id,
                    record.student_id,
                    record.status.value,
                    record.timestamp,
                    int(record.penalty_paid),
                ),
            )
            if cur.rowcount > 0:
                return record, True

            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE event_id=%s AND student_id=%s",
                (record.event_id, record.student_id),
            )
            row = fetchone(cur)
            if not row:
                raise RuntimeError(f"Attendance insert ignored for unknown event {record.event_id!r}")
            return _to_record(row), False

    def mark_paid(self, record_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_records SET penalty_paid=1 WHERE record_id=%s AND penalty_paid=0",
                (record_id,),
            )
            return cur.rowcount > 0
