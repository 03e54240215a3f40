from __future__ import annotations

import json
from typing import Any, Optional, Sequence

from ..core.enums import AuditEvent
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, load_json
from .model import AuditLogEntry
from .repository import AuditLogRepository


class MySQLAuditLogRepository(AuditLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert(self, *, event_type: AuditEvent, actor: str, entity_id: Optional[str], payload: dict[str, Any]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO audit_log(event_type, actor, entity_id, payload)
                VALUES(%s,%s,%s,%s)
                """,
                (event_type.value, actor, entity_id, json.dumps(payload, default=str)),
            )
            return int(cur.lastrowid)

    def list_recent(self, *, limit: int) -> Sequence[AuditLogEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT log_id, event_type, actor, entity_id, payload, created_at
                FROM audit_log
                ORDER BY created_at DESC, log_id DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [
                AuditLogEntry(
                    log_id=int(r["log_id"]),
                    event_type=AuditEvent(r["event_type"]),
                    actor=r["actor"],
                    created_at=r["created_at"],
                    entity_id=r.get("entity_id"),
                    payload=load_json(r.get("payload")) or {},
                )
                for r in fetchall(cur)
            ]
