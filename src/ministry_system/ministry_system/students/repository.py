from __future__ import annotations

from datetime import date
from typing import Any, Optional, Protocol, Sequence

from ..core.enums import AgeGroup, StudentStatus
from .model import Student


class StudentRepository(Protocol):
    """Repository interface for students.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_access_key(self, access_key: str) -> Optional[Student]:
        """Case-insensitive exact match."""

        raise NotImplementedError

    def get_by_compact_key(self, compact_key: str) -> Optional[Student]:
        """Match ignoring dashes and spaces (compact_key is upper-case alphanumerics)."""

        raise NotImplementedError

    def list_all(self, *, age_group: Optional[AgeGroup] = None) -> Sequence[Student]:
        """Ordered by full name."""

        raise NotImplementedError

    def create(
        self,
        *,
        access_key: str,
        full_name: str,
        age_group: AgeGroup,
        birthday: Optional[date],
        guardian_name: Optional[str],
        guardian_phone: Optional[str],
        guardian_nickname: Optional[str],
        photo_url: Optional[str],
        notes: Optional[str],
    ) -> int:
        raise NotImplementedError

    def update_fields(self, student_id: int, fields: dict[str, Any]) -> bool:
        raise NotImplementedError

    def set_absence_state(self, student_id: int, *, consecutive_absences: int, status: StudentStatus) -> bool:
        raise NotImplementedError

    def delete_by_id(self, student_id: int) -> bool:
        raise NotImplementedError
