from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from ..core.enums import AuditEvent
from .model import AuditLogEntry


class AuditLogRepository(Protocol):
    def insert(self, *, event_type: AuditEvent, actor: str, entity_id: Optional[str], payload: dict[str, Any]) -> int:
        raise NotImplementedError

    def list_recent(self, *, limit: int) -> Sequence[AuditLogEntry]:
        """Newest first."""

        raise NotImplementedError
