from __future__ import annotations

import logging
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.ids import new_id
from ..common.validators import normalize_email, require_max_length, require_min_length, require_non_empty
from ..core.constants import (
    INVALID_CREDENTIALS_MESSAGE,
    MAX_DETAILS_LENGTH,
    MAX_IDENTIFIER_LENGTH,
    MAX_NAME_LENGTH,
)
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ConflictError, ValidationError
from .model import User
from .repository import UserRepository
from .session import SessionStore

logger = logging.getLogger(__name__)


def _as_role(role) -> Role:
    try:
        return Role(role)
    except ValueError:
        raise ValidationError("Account type is not valid")


class AuthService:
    """Use cases: login, signup and the current-session slot."""

    def __init__(self, users: UserRepository, sessions: SessionStore):
        self._users = users
        self._sessions = sessions

    def authenticate(self, email: str, role: Role | str, password: Optional[str] = None) -> User:
        """Resolve email + role to a user and open a session.

        Unknown email, role mismatch and wrong password all raise the same
        AuthenticationError so callers cannot tell which part was wrong.
        Accounts created without a password (demo data) accept any password.
        """

        try:
            role = Role(role)
            email = normalize_email(email)
        except (ValueError, ValidationError):
            raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

        user = self._users.get_by_email(email)
        if not user or user.role != role:
            raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

        if user.password_hash:
            try:
                ok = check_password_hash(user.password_hash, password or "")
            except ValueError:
                # unknown hash method (e.g. a hand-edited row)
                ok = False
            if not ok:
                raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

        self._sessions.set_user_id(user.user_id)
        logger.info("User %s logged in as %s", user.user_id, role.value)
        return user

    def register(
        self,
        *,
        name: str,
        email: str,
        role: Role | str,
        identifier: str = "",
        details: str = "",
        password: Optional[str] = None,
    ) -> User:
        name = require_max_length(require_non_empty(name, "Name"), "Name", MAX_NAME_LENGTH)
        email = normalize_email(email)
        role = _as_role(role)
        identifier = require_max_length((identifier or "").strip(), "Identifier", MAX_IDENTIFIER_LENGTH)
        details = require_max_length((details or "").strip(), "Details", MAX_DETAILS_LENGTH)

        password_hash = None
        if password:
            require_min_length(password, "Password", 6)
            password_hash = generate_password_hash(password)

        if self._users.get_by_email(email):
            raise ConflictError("Email already exists")

        user = User(
            user_id=new_id(),
            name=name,
            email=email,
            role=role,
            identifier=identifier,
            details=details,
            password_hash=password_hash,
        )
        if not self._users.create_user(user):
            # lost a race with a concurrent signup for the same email
            raise ConflictError("Email already exists")

        self._sessions.set_user_id(user.user_id)
        logger.info("Registered %s account %s", role.value, user.user_id)
        return user

    def current_session(self) -> Optional[User]:
        user_id = self._sessions.get_user_id()
        if not user_id:
            return None
        user = self._users.get_by_id(user_id)
        if not user:
            # stale cookie for a user that no longer resolves
            self._sessions.clear()
        return user

    def end_session(self) -> None:
        self._sessions.clear()

    def require_session(self, role: Optional[Role] = None) -> User:
        """Acting user from the session; role mismatches are rejected."""

        user = self.current_session()
        if not user:
            raise AuthenticationError("Please log in to continue")
        if role is not None and user.role != role:
            raise AuthorizationError("You do not have permission for this action")
        return user


class UserService:
    """Read-only user lookups shared by the other feature modules."""

    def __init__(self, users: UserRepository):
        self._users = users

    def get_user(self, user_id: str) -> Optional[User]:
        return self._users.get_by_id(user_id)

    def list_students(self) -> Sequence[User]:
        return self._users.list_by_role(Role.STUDENT)

    def is_faculty(self, user_id: str) -> bool:
        user = self._users.get_by_id(user_id)
        return bool(user and user.role == Role.FACULTY)
