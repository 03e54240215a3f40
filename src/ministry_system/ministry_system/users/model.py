from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    username: str
    role: Role
    student_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {"username": self.username, "role": self.role.value, "student_id": self.student_id}

    @classmethod
    def from_dict(cls, data: dict) -> "SessionUser":
        student_id = data.get("student_id")
        return cls(
            username=data["username"],
            role=Role(data["role"]),
            student_id=int(student_id) if student_id is not None else None,
        )


@dataclass(frozen=True)
class Credentials:
    """Staff credentials from configuration, stored hashed."""

    admin_username: str
    admin_password_hash: str
    teacher_password_hash: str
