from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import PointLedgerEntry, PointRule


class LedgerRepository(Protocol):
    def create_entry(
        self,
        *,
        student_id: int,
        entry_date: date,
        category: str,
        points: int,
        recorded_by: str,
        notes: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, entry_id: int) -> Optional[PointLedgerEntry]:
        raise NotImplementedError

    def find_active(self, *, student_id: int, entry_date: date, category: str) -> Optional[PointLedgerEntry]:
        """First non-voided entry for (student, day, category)."""

        raise NotImplementedError

    def list_active(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        student_id: Optional[int] = None,
        category: Optional[str] = None,
    ) -> Sequence[PointLedgerEntry]:
        """Non-voided entries, newest first."""

        raise NotImplementedError

    def list_recent_for_student(self, student_id: int, *, limit: int) -> Sequence[PointLedgerEntry]:
        raise NotImplementedError

    def list_all(self, *, limit: int) -> Sequence[PointLedgerEntry]:
        """Including voided entries, newest first."""

        raise NotImplementedError

    def void(self, entry_id: int, *, reason: str) -> bool:
        raise NotImplementedError

    def void_all_active(self, *, reason: str) -> int:
        raise NotImplementedError

    def list_rules(self) -> Sequence[PointRule]:
        """Active rules only."""

        raise NotImplementedError
