from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import ActivitySchedule
from .repository import ActivityScheduleRepository


def _row_to_activity(r: Dict[str, Any]) -> ActivitySchedule:
    return ActivitySchedule(
        activity_id=int(r["activity_id"]),
        sunday_index=int(r["sunday_index"]),
        title=r["title"],
        is_active=bool(r["is_active"]),
    )


class MySQLActivityScheduleRepository(ActivityScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_index(self, sunday_index: int) -> Optional[ActivitySchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT activity_id, sunday_index, title, is_active
                FROM activity_schedule
                WHERE sunday_index=%s AND is_active=1
                """,
                (int(sunday_index),),
            )
            r = fetchone(cur)
            return _row_to_activity(r) if r else None

    def list_all(self) -> Sequence[ActivitySchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT activity_id, sunday_index, title, is_active FROM activity_schedule ORDER BY sunday_index"
            )
            return [_row_to_activity(r) for r in fetchall(cur)]

    def upsert(self, *, sunday_index: int, title: str, is_active: bool = True) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO activity_schedule(sunday_index, title, is_active)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE title=VALUES(title), is_active=VALUES(is_active)
                """,
                (int(sunday_index), title, 1 if is_active else 0),
            )

            # An update reports lastrowid 0.
            if cur.lastrowid:
                return int(cur.lastrowid)

            cur.execute("SELECT activity_id FROM activity_schedule WHERE sunday_index=%s", (int(sunday_index),))
            r = fetchone(cur)
            return int(r["activity_id"]) if r else 0
