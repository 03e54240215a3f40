from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AgeGroup


@dataclass(frozen=True)
class Assignment:
    """Homework posted by a teacher. No age group means every class."""

    assignment_id: int
    teacher_name: str
    title: str
    deadline: date
    task_details: str = ""
    age_group: Optional[AgeGroup] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "assignment_id": self.assignment_id,
            "teacher_name": self.teacher_name,
            "title": self.title,
            "deadline": self.deadline.isoformat(),
            "task_details": self.task_details,
            "age_group": self.age_group.value if self.age_group else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
