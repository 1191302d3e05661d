from __future__ import annotations

from typing import Iterable, Mapping, Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.enums import EventStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, to_bool, to_decimal
from .model import Event
from .repository import EventRepository

_COLUMNS = (
    "event_id, title, description, start_time, venue, created_by, "
    "is_required, penalty_amount, qr_code_data, status"
)


def _to_event(row: dict) -> Event:
    return Event(
        event_id=str(row["event_id"]),
        title=row["title"],
        description=row.get("description") or "",
        start_time=row["start_time"],
        venue=row["venue"],
        created_by=str(row["created_by"]),
        is_required=to_bool(row.get("is_required")),
        penalty_amount=to_decimal(row.get("penalty_amount")),
        qr_code_data=row["qr_code_data"],
        status=EventStatus(row["status"]),
    )


class MySQLEventRepository(EventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, event_id: str) -> Optional[Event]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM events WHERE event_id=%s", (event_id,))
            row = fetchone(cur)
            return _to_event(row) if row else None

    def get_by_qr_token(self, qr_code_data: str) -> Optional[Event]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM events WHERE qr_code_data=%s", (qr_code_data,))
            row = fetchone(cur)
            return _to_event(row) if row else None

    def get_by_ids(self, event_ids: Iterable[str]) -> Mapping[str, Event]:
        ids = sorted(set(event_ids))
        if not ids:
            return {}
        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM events WHERE event_id IN ({placeholders})", tuple(ids))
            return {e.event_id: e for e in (_to_event(r) for r in fetchall(cur))}

    def list_all(self) -> Sequence[Event]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM events")
            return [_to_event(r) for r in fetchall(cur)]

    def list_by_creator(self, created_by: str) -> Sequence[Event]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM events WHERE created_by=%s", (created_by,))
            return [_to_event(r) for r in fetchall(cur)]

    def create_event(self, event: Event) -> bool:
        # uq_events_qr collisions come back as ER_DUP_ENTRY; any other integrity error propagates.
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO events(event_id, title, description, start_time, venue, created_by,
                                       is_required, penalty_amount, qr_code_data, status)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        event.event_id,
                        event.title,
                        event.description,
                        event.start_time,
                        event.venue,
                        event.created_by,
                        int(event.is_required),
                        event.penalty_amount,
                        event.qr_code_data,
                        event.status.value,
                    ),
                )
                return cur.rowcount > 0
        except IntegrityError as e:
            if is_duplicate_key(e):
                return False
            raise

    def mark_completed(self, event_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE events SET status=%s WHERE event_id=%s AND status=%s",
                (EventStatus.COMPLETED.value, event_id, EventStatus.UPCOMING.value),
            )
            return cur.rowcount > 0
