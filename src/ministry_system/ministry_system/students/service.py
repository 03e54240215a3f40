from __future__ import annotations

import logging
import re
import secrets
from datetime import date, datetime, timedelta
from typing import Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.constants import ACCESS_KEY_ATTEMPTS, ACCESS_KEY_PREFIX
from ..core.enums import AgeGroup, Role, StudentStatus
from ..core.exceptions import AuthorizationError, ValidationError
from .model import Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^A-Z0-9]")


def calculate_age(birthday: Optional[date], today: Optional[date] = None) -> int:
    if not birthday:
        return 0
    today = today or date.today()
    age = today.year - birthday.year
    if (today.month, today.day) < (birthday.month, birthday.day):
        age -= 1
    return age


def parse_age_group(value) -> AgeGroup:
    try:
        return value if isinstance(value, AgeGroup) else AgeGroup(str(value).strip())
    except ValueError:
        raise ValidationError("Invalid age group")


class StudentService:
    """Use case: student registry (register, edit, look up, absence state)."""

    def __init__(self, students: StudentRepository):
        self._students = students

    def get(self, student_id: int) -> Student:
        student = self._students.get_by_id(int(student_id))
        if not student:
            raise ValidationError("Student not found")
        return student

    def list_students(self, *, age_group: Optional[AgeGroup] = None):
        return self._students.list_all(age_group=age_group)

    def generate_access_key(self, *, year: Optional[int] = None) -> str:
        year = year or now_local().year
        for _ in range(ACCESS_KEY_ATTEMPTS):
            candidate = f"{ACCESS_KEY_PREFIX}-{year}-{secrets.randbelow(900) + 100:03d}"
            if not self._students.get_by_access_key(candidate):
                return candidate
        raise ValidationError("Could not allocate a unique access key")

    def register(
        self,
        *,
        full_name: str,
        age_group,
        birthday: Optional[date] = None,
        guardian_name: Optional[str] = None,
        guardian_phone: Optional[str] = None,
        guardian_nickname: Optional[str] = None,
        photo_url: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Student:
        full_name = require_non_empty(full_name, "Full name")
        group = parse_age_group(age_group)
        access_key = self.generate_access_key()

        student_id = self._students.create(
            access_key=access_key,
            full_name=full_name,
            age_group=group,
            birthday=birthday,
            guardian_name=(guardian_name or "").strip() or None,
            guardian_phone=(guardian_phone or "").strip() or None,
            guardian_nickname=(guardian_nickname or "").strip() or None,
            photo_url=photo_url,
            notes=notes,
        )
        logger.info("Registered student %s with key %s", student_id, access_key)
        return self.get(student_id)

    def update(self, student_id: int, **changes) -> Student:
        """Edit registry fields. Absence counters and status are not editable here."""
        allowed = {
            "full_name",
            "birthday",
            "age_group",
            "guardian_name",
            "guardian_phone",
            "guardian_nickname",
            "photo_url",
            "notes",
        }
        unknown = set(changes) - allowed
        if unknown:
            raise ValidationError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

        fields = dict(changes)
        if "full_name" in fields:
            fields["full_name"] = require_non_empty(fields["full_name"], "Full name")
        if "age_group" in fields:
            fields["age_group"] = parse_age_group(fields["age_group"])

        self.get(student_id)
        if fields:
            self._students.update_fields(int(student_id), fields)
        return self.get(student_id)

    def delete(self, *, current_role: Role, student_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can delete students")
        if not self._students.delete_by_id(int(student_id)):
            raise ValidationError("Student not found")

    def find_by_access_key(self, access_key: str) -> Optional[Student]:
        """Resilient lookup: exact (case-insensitive), then ignoring dashes/spaces."""
        clean = (access_key or "").strip().upper()
        if not clean or clean == f"{ACCESS_KEY_PREFIX}-":
            return None

        student = self._students.get_by_access_key(clean)
        if student:
            return student

        compact = _NON_ALNUM.sub("", clean)
        if not compact:
            return None
        return self._students.get_by_compact_key(compact)

    def mark_enrolled(self, student_id: int) -> None:
        self._students.update_fields(int(student_id), {"is_enrolled": True})

    def reset_absences(self, student: Student) -> None:
        """Present today: streak back to 0, and a frozen student becomes active again."""
        status = StudentStatus.ACTIVE if student.student_status == StudentStatus.FROZEN else student.student_status
        if student.consecutive_absences == 0 and status == student.student_status:
            return
        self._students.set_absence_state(student.student_id, consecutive_absences=0, status=status)

    def record_follow_up(self, student_id: int, *, sent_at: datetime) -> None:
        self.get(student_id)
        self._students.update_fields(int(student_id), {"last_followup_sent": sent_at})

    def birthdays_this_week(self, *, today: Optional[date] = None) -> list[Student]:
        today = today or date.today()
        # Sunday..Saturday window around today
        start = today - timedelta(days=(today.weekday() + 1) % 7)
        end = start + timedelta(days=6)

        out = []
        for s in self._students.list_all():
            if not s.birthday:
                continue
            this_year = _birthday_in_year(s.birthday, today.year)
            if start <= this_year <= end:
                out.append(s)
        return out

    def birthdays_this_month(self, *, today: Optional[date] = None) -> list[Student]:
        today = today or date.today()
        out = [s for s in self._students.list_all() if s.birthday and s.birthday.month == today.month]
        out.sort(key=lambda s: s.birthday.day)
        return out


def _birthday_in_year(birthday: date, year: int) -> date:
    try:
        return birthday.replace(year=year)
    except ValueError:
        # Feb 29 in a non-leap year
        return date(year, 3, 1)
