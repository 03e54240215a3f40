from __future__ import annotations

from dataclasses import dataclass, field

from ..students.model import Student


@dataclass(frozen=True)
class TeacherActivity:
    teacher: str
    total_points: int
    unique_students: int


@dataclass(frozen=True)
class StudentScore:
    student: Student
    total: int


@dataclass(frozen=True)
class FairnessReport:
    class_average: float
    threshold: float
    teachers: list[TeacherActivity] = field(default_factory=list)
    weak_links: list[StudentScore] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "class_average": round(self.class_average, 2),
            "threshold": round(self.threshold, 2),
            "teachers": [
                {"teacher": t.teacher, "total_points": t.total_points, "unique_students": t.unique_students}
                for t in self.teachers
            ],
            "weak_links": [
                {
                    "student_id": s.student.student_id,
                    "full_name": s.student.full_name,
                    "total": s.total,
                    "percent_of_average": round(s.total / self.class_average * 100) if self.class_average else 0,
                }
                for s in self.weak_links
            ],
        }
