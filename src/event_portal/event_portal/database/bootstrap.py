"""Schema and demo-data helpers used by `create_app` and `scripts/`."""

from __future__ import annotations

import logging
import re
from datetime import timedelta
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from ..common.datetime_utils import now_utc
from ..common.ids import new_qr_token
from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)


def _strip_create_db_and_use(sql: str) -> str:
    # schema.sql names a database; the configured one wins.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_line_comments(sql: str) -> str:
    return "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ';', ignoring semicolons inside quoted strings."""
    buf: list[str] = []
    quote: str | None = None
    escape = False

    for ch in sql:
        buf.append(ch)
        if escape:
            escape = False
        elif ch == "\\":
            escape = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            buf.pop()
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(config: DBConfig) -> None:
    conn = DatabaseConnection(config).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    config = DBConfig.from_dict(db_config)
    ensure_database_exists(config)

    sql = Path(schema_path).read_text(encoding="utf-8")
    sql = _strip_line_comments(_strip_create_db_and_use(sql))

    conn = DatabaseConnection(config).connect()
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Applied schema %s to %s", schema_path, config.database)


# Demo accounts and events from the portal's initial data set.
DEMO_USERS = (
    ("demo-faculty-1", "Julius Peter Simon", "faculty@nvsu.edu.ph", "faculty", "F-1001", "Computer Science", "faculty123"),
    ("demo-student-2", "Troy Justine Au", "student@nvsu.edu.ph", "student", "20-00123", "BSIT-3", "student123"),
)


def ensure_demo_data(db_config: dict) -> None:
    """Insert the demo users/events if missing. Safe to run repeatedly."""
    config = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(config).connect()
    try:
        cur = conn.cursor()
        for user_id, name, email, role, identifier, details, password in DEMO_USERS:
            cur.execute(
                """
                INSERT IGNORE INTO users(user_id, name, email, role, identifier, details, password_hash)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (user_id, name, email, role, identifier, details, generate_password_hash(password)),
            )

        now = now_utc()
        events = (
            (
                "demo-event-101",
                "CITE General Assembly",
                "Mandatory assembly for all IT students regarding new policies.",
                now + timedelta(days=2),
                "University Gym",
                1,
                "150.00",
                "upcoming",
            ),
            (
                "demo-event-102",
                "Tech Talk: AI in 2025",
                "A seminar on the future of Artificial Intelligence.",
                now - timedelta(days=1),
                "AVR 1",
                0,
                "0.00",
                "completed",
            ),
        )
        for event_id, title, description, start_time, venue, is_required, penalty, status in events:
            cur.execute(
                """
                INSERT IGNORE INTO events(event_id, title, description, start_time, venue, created_by,
                                          is_required, penalty_amount, qr_code_data, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (event_id, title, description, start_time, venue, "demo-faculty-1",
                 is_required, penalty, new_qr_token(), status),
            )

        cur.execute(
            """
            INSERT IGNORE INTO attendance_records(record_id, event_id, student_id, status, timestamp, penalty_paid)
            VALUES(%s,%s,%s,%s,%s,0)
            """,
            ("demo-att-1", "demo-event-102", "demo-student-2", "present", now - timedelta(days=1)),
        )
        conn.commit()
    finally:
        conn.close()
    logger.info("Demo data ready in %s", config.database)


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
