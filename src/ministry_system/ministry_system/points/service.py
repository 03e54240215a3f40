from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence, Union

from ..audit.service import AuditLogger
from ..common.datetime_utils import now_local
from ..common.validators import require_int, require_non_empty
from ..core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_POINT_RULES, SEASON_RESET_REASON
from ..core.enums import AuditEvent, Role
from ..core.exceptions import AuthorizationError, CollaboratorError, DuplicateCategoryError, ValidationError
from ..settings.service import SettingsService
from .model import PointCategory, PointLedgerEntry, PointRule
from .repository import LedgerRepository

logger = logging.getLogger(__name__)


class PointsService:
    """Points engine: daily duplicate guard, append-only ledger, soft voids."""

    def __init__(self, ledger: LedgerRepository, settings: SettingsService, audit: AuditLogger):
        self._ledger = ledger
        self._settings = settings
        self._audit = audit

    def add_points(
        self,
        student_id: int,
        category: Union[str, PointCategory],
        points: int,
        actor: str,
        notes: Optional[str] = None,
        *,
        now: Optional[datetime] = None,
    ) -> PointLedgerEntry:
        now = now or now_local()
        today = now.date()

        points = require_int(points, "Points")
        actor = require_non_empty(actor, "Actor")
        if isinstance(category, PointCategory):
            tagged = PointCategory(category.kind, require_non_empty(category.name, "Category"))
        else:
            tagged = PointCategory.classify(require_non_empty(category, "Category"), points)

        if not self._settings.current().allow_duplicate_points and tagged.once_per_day:
            existing = self._ledger.find_active(student_id=int(student_id), entry_date=today, category=tagged.name)
            if existing:
                raise DuplicateCategoryError(tagged.name)

        entry_id = self._ledger.create_entry(
            student_id=int(student_id),
            entry_date=today,
            category=tagged.name,
            points=points,
            recorded_by=actor,
            notes=notes,
        )
        entry = self._ledger.get_by_id(entry_id)
        if entry is None:
            raise CollaboratorError(f"Ledger entry {entry_id} was not readable after insert")

        self._audit.log(
            AuditEvent.POINT_ADD,
            actor,
            entity_id=entry_id,
            payload={"student_id": int(student_id), "category": tagged.name, "points": points, "kind": tagged.kind.value},
        )
        return entry

    def void_entry(self, entry_id: int, reason: str, *, actor: str) -> None:
        """One-way: a voided entry is never restored, history stays for audit."""
        reason = require_non_empty(reason, "Void reason")
        if self._ledger.get_by_id(int(entry_id)) is None:
            raise ValidationError("Ledger entry not found")
        self._ledger.void(int(entry_id), reason=reason)
        self._audit.log(AuditEvent.POINT_VOID, actor, entity_id=entry_id, payload={"reason": reason})

    def reset_season(self, *, current_role: Role, actor: str) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can reset the season")

        voided = self._ledger.void_all_active(reason=SEASON_RESET_REASON)
        logger.info("Season reset by %s voided %s entries", actor, voided)
        self._audit.log(
            AuditEvent.AUDIT_WIPE,
            actor,
            payload={"action": "SEASON_RESET", "voided": voided, "timestamp": now_local().isoformat()},
        )
        return voided

    def total_points(self, student_id: int) -> int:
        return sum(e.points for e in self._ledger.list_active(student_id=int(student_id)))

    def recent_history(self, student_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[PointLedgerEntry]:
        return self._ledger.list_recent_for_student(int(student_id), limit=int(limit))

    def list_ledger(self, *, limit: int = 500) -> Sequence[PointLedgerEntry]:
        return self._ledger.list_all(limit=int(limit))

    def list_rules(self) -> list[PointRule]:
        rules = list(self._ledger.list_rules())
        if rules:
            return rules
        return [PointRule(rule_id=0, category=c, points=p) for c, p in DEFAULT_POINT_RULES]
