from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import CheckoutMode, SessionStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AttendanceSession
from .repository import SessionRepository

logger = logging.getLogger(__name__)

_COLUMNS = """
    session_id, student_id, session_date, check_in_time, check_out_time, checkout_mode,
    checked_in_by, checked_out_by, status, created_at
"""


def _row_to_session(r: dict) -> AttendanceSession:
    mode = r.get("checkout_mode")
    return AttendanceSession(
        session_id=int(r["session_id"]),
        student_id=int(r["student_id"]),
        session_date=r["session_date"],
        check_in_time=r["check_in_time"],
        checked_in_by=r["checked_in_by"],
        status=SessionStatus(r["status"]),
        check_out_time=r.get("check_out_time"),
        checkout_mode=CheckoutMode(mode) if mode else None,
        checked_out_by=r.get("checked_out_by"),
        created_at=r.get("created_at"),
    )


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_date(
        self,
        session_date: date,
        *,
        status: Optional[SessionStatus] = None,
        student_id: Optional[int] = None,
    ) -> Sequence[AttendanceSession]:
        clauses = ["session_date=%s"]
        params: list[object] = [session_date]

        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if student_id is not None:
            clauses.append("student_id=%s")
            params.append(int(student_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_sessions WHERE {where} ORDER BY check_in_time ASC",
                tuple(params),
            )
            return [_row_to_session(r) for r in fetchall(cur)]

    def create_session(
        self,
        *,
        student_id: int,
        session_date: date,
        check_in_time: datetime,
        checked_in_by: str,
    ) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    """
                    INSERT INTO attendance_sessions(student_id, session_date, check_in_time, checked_in_by, status)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (int(student_id), session_date, check_in_time, checked_in_by, SessionStatus.OPEN.value),
                )
            except mysql.connector.IntegrityError:
                logger.info("Concurrent check-in rejected for student %s on %s", student_id, session_date)
                return None
            return int(cur.lastrowid)

    def close_session(
        self,
        *,
        session_id: int,
        check_out_time: datetime,
        checkout_mode: CheckoutMode,
        checked_out_by: str,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_sessions
                SET check_out_time=%s, checkout_mode=%s, checked_out_by=%s, status=%s
                WHERE session_id=%s AND status=%s
                """,
                (
                    check_out_time,
                    checkout_mode.value,
                    checked_out_by,
                    SessionStatus.CLOSED.value,
                    int(session_id),
                    SessionStatus.OPEN.value,
                ),
            )
            return cur.rowcount > 0

    def list_recent(self, *, limit: int) -> Sequence[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_sessions ORDER BY check_in_time DESC LIMIT %s",
                (int(limit),),
            )
            return [_row_to_session(r) for r in fetchall(cur)]

    def claim_sweep(self, *, sweep_date: date, actor: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT IGNORE INTO absence_sweeps(sweep_date, actor) VALUES(%s,%s)",
                (sweep_date, actor),
            )
            return cur.rowcount == 1

    def record_sweep(self, *, sweep_date: date, actor: str, absent_count: int, frozen_count: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO absence_sweeps(sweep_date, actor, absent_count, frozen_count)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    actor=VALUES(actor),
                    absent_count=absent_count + VALUES(absent_count),
                    frozen_count=frozen_count + VALUES(frozen_count)
                """,
                (sweep_date, actor, int(absent_count), int(frozen_count)),
            )
