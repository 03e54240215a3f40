from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.constants import MANUAL_CATEGORY_MARKER
from ..core.enums import CategoryKind


@dataclass(frozen=True)
class PointLedgerEntry:
    """Domain entity: one immutable ledger line (only the void flag ever changes)."""

    entry_id: int
    student_id: int
    entry_date: date
    category: str
    points: int
    recorded_by: str
    created_at: datetime
    notes: Optional[str] = None
    voided: bool = False
    void_reason: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "entry_id": self.entry_id,
            "student_id": self.student_id,
            "entry_date": self.entry_date.isoformat(),
            "category": self.category,
            "points": self.points,
            "notes": self.notes,
            "recorded_by": self.recorded_by,
            "voided": self.voided,
            "void_reason": self.void_reason,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class PointCategory:
    """Tagged category: the duplicate guard dispatches on `kind`, the ledger stores `name`."""

    kind: CategoryKind
    name: str

    @classmethod
    def classify(cls, name: str, points: int) -> "PointCategory":
        if points < 0:
            return cls(CategoryKind.CORRECTION, name)
        if MANUAL_CATEGORY_MARKER in name:
            return cls(CategoryKind.MANUAL, name)
        return cls(CategoryKind.STANDARD, name)

    @property
    def once_per_day(self) -> bool:
        return self.kind == CategoryKind.STANDARD


@dataclass(frozen=True)
class PointRule:
    rule_id: int
    category: str
    points: int
    is_active: bool = True

    def to_dict(self) -> dict:
        return {"rule_id": self.rule_id, "category": self.category, "points": self.points, "is_active": self.is_active}
