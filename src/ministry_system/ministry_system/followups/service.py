from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from urllib.parse import quote

from ..audit.service import AuditLogger
from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.constants import FOLLOWUP_HIGH_ALERT
from ..core.enums import AuditEvent, StudentStatus
from ..students.model import Student, first_name_of
from ..students.repository import StudentRepository
from ..students.service import StudentService

FOLLOWUP_STATUSES = frozenset({StudentStatus.ACTIVE, StudentStatus.FROZEN})


@dataclass(frozen=True)
class FollowUpBuckets:
    one: list[Student] = field(default_factory=list)
    two: list[Student] = field(default_factory=list)
    three_plus: list[Student] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "one": [s.to_dict() for s in self.one],
            "two": [s.to_dict() for s in self.two],
            "three_plus": [s.to_dict() for s in self.three_plus],
        }


def guardian_greeting(student: Student) -> str:
    if student.guardian_nickname:
        return student.guardian_nickname.strip()
    return first_name_of(student.guardian_name) or "Parent"


def follow_up_message(student: Student) -> str:
    child = student.first_name or "there"
    count = student.consecutive_absences
    if count <= 1:
        return (
            f"Hi {child}! We missed you at Sunday School last week. "
            "Hope to see you this Sunday!"
        )
    if count == 2:
        return (
            f"Hello {guardian_greeting(student)}, we have missed {child} for the past two Sundays. "
            f"Is everything okay? We would love to have {child} back with us."
        )
    return (
        f"Hello {guardian_greeting(student)}, this is a friendly reminder that {child} has been away "
        f"for {count} Sundays. Please let us know if there is anything we can help with."
    )


def sms_link(phone: Optional[str], message: str) -> Optional[str]:
    phone = (phone or "").strip()
    if not phone:
        return None
    return f"sms:{phone}?body={quote(message)}"


class FollowUpService:
    """Absence follow-up queue for teachers."""

    def __init__(self, students: StudentRepository, audit: AuditLogger):
        self._students = students
        self._student_service = StudentService(students)
        self._audit = audit

    def candidates(self) -> FollowUpBuckets:
        buckets = FollowUpBuckets()
        for s in self._students.list_all():
            if s.student_status not in FOLLOWUP_STATUSES or s.consecutive_absences <= 0:
                continue
            if s.consecutive_absences == 1:
                buckets.one.append(s)
            elif s.consecutive_absences == 2:
                buckets.two.append(s)
            else:
                buckets.three_plus.append(s)
        buckets.three_plus.sort(key=lambda s: -s.consecutive_absences)
        return buckets

    def compose(self, student_id: int) -> dict:
        student = self._student_service.get(student_id)
        message = follow_up_message(student)
        return {
            "student_id": student.student_id,
            "message": message,
            "sms_link": sms_link(student.guardian_phone, message),
            "high_alert": student.consecutive_absences >= FOLLOWUP_HIGH_ALERT,
        }

    def record_follow_up(self, student_id: int, actor: str, *, now: Optional[datetime] = None) -> datetime:
        actor = require_non_empty(actor, "Actor")
        sent_at = now or now_local()
        self._student_service.record_follow_up(student_id, sent_at=sent_at)
        self._audit.log(
            AuditEvent.FOLLOWUP_SENT,
            actor,
            entity_id=int(student_id),
            payload={"sent_at": sent_at.isoformat()},
        )
        return sent_at
