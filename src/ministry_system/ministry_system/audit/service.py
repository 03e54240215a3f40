from __future__ import annotations

import logging
from typing import Any, Optional

from ..core.enums import AuditEvent
from .repository import AuditLogRepository

logger = logging.getLogger(__name__)


class AuditLogger:
    """Best-effort audit sink.

    A failed audit write never fails the operation that produced it.
    """

    def __init__(self, logs: AuditLogRepository):
        self._logs = logs

    def log(
        self,
        event_type: AuditEvent,
        actor: str,
        *,
        entity_id: Optional[object] = None,
        payload: Optional[dict[str, Any]] = None,
    ) -> None:
        try:
            self._logs.insert(
                event_type=event_type,
                actor=actor,
                entity_id=str(entity_id) if entity_id is not None else None,
                payload=payload or {},
            )
        except Exception:
            logger.warning("Audit log write failed (%s by %s)", event_type.value, actor, exc_info=True)

    def list_logs(self, *, limit: int = 200):
        return self._logs.list_recent(limit=int(limit))
