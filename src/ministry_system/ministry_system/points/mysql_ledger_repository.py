from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import PointLedgerEntry, PointRule
from .repository import LedgerRepository

_COLUMNS = """
    entry_id, student_id, entry_date, category, points, notes, recorded_by,
    voided, void_reason, created_at
"""


def _row_to_entry(r: dict) -> PointLedgerEntry:
    return PointLedgerEntry(
        entry_id=int(r["entry_id"]),
        student_id=int(r["student_id"]),
        entry_date=r["entry_date"],
        category=r["category"],
        points=int(r["points"]),
        recorded_by=r["recorded_by"],
        created_at=r["created_at"],
        notes=r.get("notes"),
        voided=bool(r.get("voided")),
        void_reason=r.get("void_reason"),
    )


class MySQLLedgerRepository(LedgerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_entry(
        self,
        *,
        student_id: int,
        entry_date: date,
        category: str,
        points: int,
        recorded_by: str,
        notes: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO point_ledger(student_id, entry_date, category, points, notes, recorded_by, voided)
                VALUES(%s,%s,%s,%s,%s,%s,0)
                """,
                (int(student_id), entry_date, category, int(points), notes, recorded_by),
            )
            return int(cur.lastrowid)

    def get_by_id(self, entry_id: int) -> Optional[PointLedgerEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM point_ledger WHERE entry_id=%s", (int(entry_id),))
            r = fetchone(cur)
            return _row_to_entry(r) if r else None

    def find_active(self, *, student_id: int, entry_date: date, category: str) -> Optional[PointLedgerEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM point_ledger
                WHERE student_id=%s AND entry_date=%s AND category = BINARY %s AND voided=0
                ORDER BY created_at ASC
                LIMIT 1
                """,
                (int(student_id), entry_date, category),
            )
            r = fetchone(cur)
            return _row_to_entry(r) if r else None

    def list_active(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        student_id: Optional[int] = None,
        category: Optional[str] = None,
    ) -> Sequence[PointLedgerEntry]:
        clauses = ["voided=0"]
        params: list[object] = []

        if start_date is not None:
            clauses.append("entry_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("entry_date <= %s")
            params.append(end_date)
        if student_id is not None:
            clauses.append("student_id=%s")
            params.append(int(student_id))
        if category is not None:
            clauses.append("category = BINARY %s")
            params.append(category)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM point_ledger WHERE {where} ORDER BY created_at DESC, entry_id DESC",
                tuple(params),
            )
            return [_row_to_entry(r) for r in fetchall(cur)]

    def list_recent_for_student(self, student_id: int, *, limit: int) -> Sequence[PointLedgerEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM point_ledger
                WHERE student_id=%s AND voided=0
                ORDER BY created_at DESC, entry_id DESC
                LIMIT %s
                """,
                (int(student_id), int(limit)),
            )
            return [_row_to_entry(r) for r in fetchall(cur)]

    def list_all(self, *, limit: int) -> Sequence[PointLedgerEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM point_ledger ORDER BY created_at DESC, entry_id DESC LIMIT %s",
                (int(limit),),
            )
            return [_row_to_entry(r) for r in fetchall(cur)]

    def void(self, entry_id: int, *, reason: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE point_ledger SET voided=1, void_reason=%s WHERE entry_id=%s",
                (reason, int(entry_id)),
            )
            return cur.rowcount > 0

    def void_all_active(self, *, reason: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE point_ledger SET voided=1, void_reason=%s WHERE voided=0", (reason,))
            return int(cur.rowcount)

    def list_rules(self) -> Sequence[PointRule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT rule_id, category, points, is_active
                FROM point_rules
                WHERE is_active=1
                ORDER BY points ASC, category ASC
                """
            )
            return [
                PointRule(
                    rule_id=int(r["rule_id"]),
                    category=r["category"],
                    points=int(r["points"]),
                    is_active=bool(r["is_active"]),
                )
                for r in fetchall(cur)
            ]
