from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import CategoryKind
from ..core.exceptions import ValidationError
from .model import PointCategory, PointLedgerEntry
from .service import PointsService


@dataclass(frozen=True)
class CommittedAdjustment:
    student_id: int
    category: str
    points: int
    entry_id: int


class PointAdjustmentHistory:
    """Undo/redo for one classroom session.

    Both directions post a new ledger entry with the inverted sign. Nothing
    already committed is edited or voided.
    """

    def __init__(self, points: PointsService, actor: str):
        self._points = points
        self._actor = actor
        self._history: list[CommittedAdjustment] = []
        self._redo: list[CommittedAdjustment] = []

    @property
    def can_undo(self) -> bool:
        return bool(self._history)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def award(self, student_id: int, category: str, points: int, notes: Optional[str] = None) -> PointLedgerEntry:
        entry = self._points.add_points(student_id, category, points, self._actor, notes)
        self._history.append(_committed(entry))
        self._redo.clear()
        return entry

    def undo(self) -> PointLedgerEntry:
        if not self._history:
            raise ValidationError("Nothing to undo")
        last = self._history[-1]
        entry = self._post_inverse(last, note="Undo")
        self._history.pop()
        self._redo.append(_committed(entry))
        return entry

    def redo(self) -> PointLedgerEntry:
        if not self._redo:
            raise ValidationError("Nothing to redo")
        last = self._redo[-1]
        entry = self._post_inverse(last, note="Redo")
        self._redo.pop()
        self._history.append(_committed(entry))
        return entry

    def _post_inverse(self, adj: CommittedAdjustment, *, note: str) -> PointLedgerEntry:
        # Reversals are corrections whatever their sign, so the daily guard never blocks them.
        return self._points.add_points(
            adj.student_id,
            PointCategory(CategoryKind.CORRECTION, adj.category),
            -adj.points,
            self._actor,
            f"{note} of entry #{adj.entry_id}",
        )


def _committed(entry: PointLedgerEntry) -> CommittedAdjustment:
    return CommittedAdjustment(
        student_id=entry.student_id,
        category=entry.category,
        points=entry.points,
        entry_id=entry.entry_id,
    )
