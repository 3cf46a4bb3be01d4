"""Authenticated user model."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Role(Enum):
    """Role assigned to a user by the backend."""

    USER = "user"
    ADMIN = "admin"


@dataclass(frozen=True)
class User:
    """The user half of a session.

    Attributes:
        id: Backend user identifier.
        email: Login email, also used to match document ownership.
        role: ``user`` or ``admin``.
    """

    id: str
    email: str
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "User":
        """Parse a user object as returned by login or stored locally.

        Raises:
            KeyError: If ``id`` or ``email`` is missing.
            ValueError: If ``role`` is not a known role.
            TypeError: If ``data`` is not a mapping.
        """
        user_id = data.get("id", data.get("_id"))
        if user_id is None:
            raise KeyError("id")
        return cls(
            id=str(user_id),
            email=str(data["email"]),
            role=Role(data.get("role", Role.USER.value)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "email": self.email, "role": self.role.value}
