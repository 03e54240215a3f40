from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AgeGroup
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Assignment
from .repository import AssignmentRepository

_COLUMNS = "assignment_id, teacher_name, title, deadline, task_details, age_group, created_at"


def _row_to_assignment(r: Dict[str, Any]) -> Assignment:
    return Assignment(
        assignment_id=int(r["assignment_id"]),
        teacher_name=r["teacher_name"],
        title=r["title"],
        deadline=r["deadline"],
        task_details=r.get("task_details") or "",
        age_group=AgeGroup(r["age_group"]) if r.get("age_group") else None,
        created_at=r.get("created_at"),
    )


class MySQLAssignmentRepository(AssignmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        teacher_name: str,
        title: str,
        deadline: date,
        task_details: str,
        age_group: Optional[AgeGroup],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO assignments(teacher_name, title, deadline, task_details, age_group)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (teacher_name, title, deadline, task_details, age_group.value if age_group else None),
            )
            return int(cur.lastrowid)

    def get_by_id(self, assignment_id: int) -> Optional[Assignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM assignments WHERE assignment_id=%s", (int(assignment_id),))
            r = fetchone(cur)
            return _row_to_assignment(r) if r else None

    def list_all(self) -> Sequence[Assignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM assignments ORDER BY created_at DESC, assignment_id DESC")
            return [_row_to_assignment(r) for r in fetchall(cur)]

    def delete_by_id(self, assignment_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM assignments WHERE assignment_id=%s", (int(assignment_id),))
            return cur.rowcount > 0
