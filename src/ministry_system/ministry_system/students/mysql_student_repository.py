from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

from ..core.enums import AgeGroup, StudentStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Student
from .repository import StudentRepository

_COLUMNS = """
    student_id, access_key, full_name, birthday, age_group, guardian_name, guardian_phone,
    guardian_nickname, photo_url, is_enrolled, notes, consecutive_absences, student_status,
    last_followup_sent, created_at, updated_at
"""

_UPDATABLE = {
    "access_key",
    "full_name",
    "birthday",
    "age_group",
    "guardian_name",
    "guardian_phone",
    "guardian_nickname",
    "photo_url",
    "is_enrolled",
    "notes",
    "consecutive_absences",
    "student_status",
    "last_followup_sent",
}


def _to_db(value: Any) -> Any:
    if isinstance(value, (AgeGroup, StudentStatus)):
        return value.value
    if isinstance(value, bool):
        return int(value)
    return value


def _row_to_student(r: dict) -> Student:
    return Student(
        student_id=int(r["student_id"]),
        access_key=r["access_key"],
        full_name=r["full_name"],
        birthday=r.get("birthday"),
        age_group=AgeGroup(r["age_group"]),
        guardian_name=r.get("guardian_name"),
        guardian_phone=r.get("guardian_phone"),
        guardian_nickname=r.get("guardian_nickname"),
        photo_url=r.get("photo_url"),
        is_enrolled=bool(r.get("is_enrolled")),
        notes=r.get("notes"),
        consecutive_absences=int(r.get("consecutive_absences") or 0),
        student_status=StudentStatus(r.get("student_status") or StudentStatus.ACTIVE.value),
        last_followup_sent=r.get("last_followup_sent"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, params: tuple) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE {where} LIMIT 1", params)
            r = fetchone(cur)
            return _row_to_student(r) if r else None

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self._get_one("student_id=%s", (int(student_id),))

    def get_by_access_key(self, access_key: str) -> Optional[Student]:
        return self._get_one("UPPER(access_key)=%s", (access_key.upper(),))

    def get_by_compact_key(self, compact_key: str) -> Optional[Student]:
        return self._get_one(
            "UPPER(REPLACE(REPLACE(access_key, '-', ''), ' ', ''))=%s",
            (compact_key,),
        )

    def list_all(self, *, age_group: Optional[AgeGroup] = None) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            if age_group is None:
                cur.execute(f"SELECT {_COLUMNS} FROM students ORDER BY full_name ASC")
            else:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM students WHERE age_group=%s ORDER BY full_name ASC",
                    (age_group.value,),
                )
            return [_row_to_student(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        access_key: str,
        full_name: str,
        age_group: AgeGroup,
        birthday: Optional[date],
        guardian_name: Optional[str],
        guardian_phone: Optional[str],
        guardian_nickname: Optional[str],
        photo_url: Optional[str],
        notes: Optional[str],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO students(
                    access_key, full_name, birthday, age_group, guardian_name, guardian_phone,
                    guardian_nickname, photo_url, notes, is_enrolled, consecutive_absences, student_status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,0,0,%s)
                """,
                (
                    access_key,
                    full_name,
                    birthday,
                    age_group.value,
                    guardian_name,
                    guardian_phone,
                    guardian_nickname,
                    photo_url,
                    notes,
                    StudentStatus.ACTIVE.value,
                ),
            )
            return int(cur.lastrowid)

    def update_fields(self, student_id: int, fields: dict[str, Any]) -> bool:
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise ValueError(f"Unsupported student fields: {sorted(unknown)}")
        if not fields:
            return False

        names = sorted(fields)
        assignments = ", ".join(f"{name}=%s" for name in names)
        params = [_to_db(fields[name]) for name in names]
        params.append(int(student_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE students SET {assignments} WHERE student_id=%s", tuple(params))
            return cur.rowcount > 0

    def set_absence_state(self, student_id: int, *, consecutive_absences: int, status: StudentStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE students
                SET consecutive_absences=%s, student_status=%s
                WHERE student_id=%s
                """,
                (int(consecutive_absences), status.value, int(student_id)),
            )
            return cur.rowcount > 0

    def delete_by_id(self, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE student_id=%s", (int(student_id),))
            return cur.rowcount > 0
