from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AgeGroup, StudentStatus


@dataclass(frozen=True)
class Student:
    """Domain entity: a registered child (or adult/guest registrant).

    Note: plain data object, no DB access code.
    """

    student_id: int
    access_key: str
    full_name: str
    age_group: AgeGroup
    birthday: Optional[date] = None
    guardian_name: Optional[str] = None
    guardian_phone: Optional[str] = None
    guardian_nickname: Optional[str] = None
    photo_url: Optional[str] = None
    is_enrolled: bool = False
    notes: Optional[str] = None
    consecutive_absences: int = 0
    student_status: StudentStatus = StudentStatus.ACTIVE
    last_followup_sent: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def first_name(self) -> str:
        return first_name_of(self.full_name)

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "access_key": self.access_key,
            "full_name": self.full_name,
            "age_group": self.age_group.value,
            "birthday": self.birthday.isoformat() if self.birthday else None,
            "guardian_name": self.guardian_name,
            "guardian_phone": self.guardian_phone,
            "guardian_nickname": self.guardian_nickname,
            "photo_url": self.photo_url,
            "is_enrolled": self.is_enrolled,
            "notes": self.notes,
            "consecutive_absences": self.consecutive_absences,
            "student_status": self.student_status.value,
            "last_followup_sent": self.last_followup_sent.isoformat() if self.last_followup_sent else None,
        }


def first_name_of(full_name: Optional[str]) -> str:
    """First given name; roster names are often "LAST, FIRST M."."""
    if not full_name:
        return ""
    name = full_name.split(",", 1)[1] if "," in full_name else full_name
    parts = name.strip().split()
    return parts[0].title() if parts else ""
