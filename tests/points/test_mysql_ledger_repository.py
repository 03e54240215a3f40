from __future__ import annotations

from datetime import date

import pytest

pytest.importorskip("mysql.connector")

from src.ministry_system.ministry_system.points.mysql_ledger_repository import MySQLLedgerRepository  # noqa: E402


class RecordingCursor:
    def __init__(self, statements):
        self.statements = statements

    def execute(self, sql, params=()):
        self.statements.append((" ".join(sql.split()), tuple(params)))

    def fetchone(self):
        return None

    def fetchall(self):
        return []

    def close(self):
        pass


class RecordingConnection:
    def __init__(self):
        self.statements = []

    def connect(self):
        return self

    def cursor(self, dictionary=True):
        return RecordingCursor(self.statements)

    def commit(self):
        pass

    def rollback(self):
        pass

    def close(self):
        pass


@pytest.fixture
def conn():
    return RecordingConnection()


def test_duplicate_lookup_matches_category_byte_for_byte(conn):
    MySQLLedgerRepository(conn).find_active(student_id=1, entry_date=date(2026, 3, 1), category="memory verse")

    sql, params = conn.statements[0]
    assert "category = BINARY %s" in sql
    assert params == (1, date(2026, 3, 1), "memory verse")


def test_category_filter_matches_byte_for_byte(conn):
    MySQLLedgerRepository(conn).list_active(start_date=date(2026, 3, 1), category="Attendance")

    sql, params = conn.statements[0]
    assert "category = BINARY %s" in sql
    assert params == (date(2026, 3, 1), "Attendance")
