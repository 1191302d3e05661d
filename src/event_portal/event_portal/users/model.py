from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a student or faculty account.

    `identifier` (institution ID number) and `details` (course/year or
    department) are display-only.
    """

    user_id: str
    name: str
    email: str
    role: Role
    identifier: str = ""
    details: str = ""
    password_hash: Optional[str] = None

    def to_public_dict(self) -> dict:
        return {
            "id": self.user_id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "identifier": self.identifier,
            "details": self.details,
        }
