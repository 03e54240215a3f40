from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..students.model import Student


@dataclass(frozen=True)
class LeaderboardEntry:
    student: Student
    total_points: int
    last_point_date: datetime

    def to_dict(self, *, rank: int) -> dict:
        return {
            "rank": rank,
            "student_id": self.student.student_id,
            "full_name": self.student.full_name,
            "age_group": self.student.age_group.value,
            "total_points": self.total_points,
            "last_point_date": self.last_point_date.isoformat(),
        }
