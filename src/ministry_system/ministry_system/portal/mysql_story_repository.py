from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .repository import StoryHistoryRepository


class MySQLStoryHistoryRepository(StoryHistoryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_topics(self, student_id: int) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT topic FROM story_history WHERE student_id=%s ORDER BY created_at ASC, story_id ASC",
                (int(student_id),),
            )
            return [r["topic"] for r in fetchall(cur)]

    def add_topic(self, *, student_id: int, topic: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO story_history(student_id, topic) VALUES(%s,%s)",
                (int(student_id), topic),
            )
            return int(cur.lastrowid)
