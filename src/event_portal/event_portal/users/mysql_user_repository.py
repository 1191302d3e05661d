from __future__ import annotations

from typing import Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import User
from .repository import UserRepository

_COLUMNS = "user_id, name, email, role, identifier, details, password_hash"


def _to_user(row: dict) -> User:
    return User(
        user_id=str(row["user_id"]),
        name=row["name"],
        email=row["email"],
        role=Role(row["role"]),
        identifier=row.get("identifier") or "",
        details=row.get("details") or "",
        password_hash=row.get("password_hash"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (user_id,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def list_by_role(self, role: Role) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE role=%s ORDER BY name ASC", (role.value,))
            return [_to_user(r) for r in fetchall(cur)]

    def create_user(self, user: User) -> bool:
        # uq_users_email makes the duplicate check atomic; a duplicate surfaces as ER_DUP_ENTRY.
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO users(user_id, name, email, role, identifier, details, password_hash)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        user.user_id,
                        user.name,
                        user.email,
                        user.role.value,
                        user.identifier,
                        user.details,
                        user.password_hash,
                    ),
                )
                return cur.rowcount > 0
        except IntegrityError as e:
            if is_duplicate_key(e):
                return False
            raise
