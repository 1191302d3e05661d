"""Single-slot "current session" storage.

The web app keeps the slot in Flask's signed cookie session; scripts and
tests use the in-memory store.
"""

from __future__ import annotations

from typing import Optional, Protocol

from flask import session

SESSION_USER_KEY = "user_id"


class SessionStore(Protocol):
    def get_user_id(self) -> Optional[str]:
        raise NotImplementedError

    def set_user_id(self, user_id: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class FlaskSessionStore(SessionStore):
    """Reads the request-bound `flask.session`; only valid inside a request."""

    def get_user_id(self) -> Optional[str]:
        return session.get(SESSION_USER_KEY)

    def set_user_id(self, user_id: str) -> None:
        session.clear()
        session[SESSION_USER_KEY] = user_id
        # cookie lifetime comes from app.permanent_session_lifetime (SESSION_DAYS)
        session.permanent = True

    def clear(self) -> None:
        session.clear()


class InMemorySessionStore(SessionStore):
    def __init__(self, user_id: Optional[str] = None):
        self._user_id = user_id

    def get_user_id(self) -> Optional[str]:
        return self._user_id

    def set_user_id(self, user_id: str) -> None:
        self._user_id = user_id

    def clear(self) -> None:
        self._user_id = None
