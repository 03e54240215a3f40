from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AgeGroup, CheckoutMode, PresenceStatus, SessionStatus
from ..students.model import Student


@dataclass(frozen=True)
class AttendanceSession:
    """Domain entity: one check-in of a student on a service day."""

    session_id: int
    student_id: int
    session_date: date
    check_in_time: datetime
    checked_in_by: str
    status: SessionStatus
    check_out_time: Optional[datetime] = None
    checkout_mode: Optional[CheckoutMode] = None
    checked_out_by: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.status == SessionStatus.OPEN

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "student_id": self.student_id,
            "session_date": self.session_date.isoformat(),
            "check_in_time": self.check_in_time.isoformat(),
            "check_out_time": self.check_out_time.isoformat() if self.check_out_time else None,
            "checkout_mode": self.checkout_mode.value if self.checkout_mode else None,
            "checked_in_by": self.checked_in_by,
            "checked_out_by": self.checked_out_by,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class AttendanceStatusEntry:
    """Read-model for the daily attendance report."""

    student: Student
    status: PresenceStatus
    points_awarded: bool
    check_in_time: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "student": self.student.to_dict(),
            "status": self.status.value,
            "points_awarded": self.points_awarded,
            "check_in_time": self.check_in_time.isoformat() if self.check_in_time else None,
        }


@dataclass(frozen=True)
class ClassroomStat:
    group: AgeGroup
    total: int
    present: int

    def to_dict(self) -> dict:
        return {"group": self.group.value, "total": self.total, "present": self.present}


@dataclass(frozen=True)
class SweepResult:
    absent_count: int
    frozen_count: int

    def to_dict(self) -> dict:
        return {"absent_count": self.absent_count, "frozen_count": self.frozen_count}
