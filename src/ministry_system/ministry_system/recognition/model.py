from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import FaceAngle
from ..students.model import Student


@dataclass(frozen=True)
class FaceEmbedding:
    embedding_id: int
    student_id: int
    vector: list[float]
    angle: FaceAngle
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class MatchResult:
    student: Optional[Student]
    score: float

    @property
    def matched(self) -> bool:
        return self.student is not None

    def to_dict(self) -> dict:
        return {
            "matched": self.matched,
            "score": round(self.score, 4),
            "student": self.student.to_dict() if self.student else None,
        }
