from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from ..core.enums import AuditEvent


@dataclass(frozen=True)
class AuditLogEntry:
    log_id: int
    event_type: AuditEvent
    actor: str
    created_at: datetime
    entity_id: Optional[str] = None
    payload: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "log_id": self.log_id,
            "event_type": self.event_type.value,
            "actor": self.actor,
            "entity_id": self.entity_id,
            "payload": self.payload,
            "created_at": self.created_at.isoformat(),
        }
