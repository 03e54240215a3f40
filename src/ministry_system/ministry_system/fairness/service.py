from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import month_bounds
from ..core.constants import WEAK_LINK_RATIO
from ..core.enums import AgeGroup
from ..points.model import PointLedgerEntry
from ..points.repository import LedgerRepository
from ..students.model import Student
from ..students.repository import StudentRepository
from .model import FairnessReport, StudentScore, TeacherActivity

UNKNOWN_TEACHER = "Unknown"


def teacher_activity(entries: Iterable[PointLedgerEntry]) -> list[TeacherActivity]:
    totals: dict[str, int] = defaultdict(int)
    touched: dict[str, set[int]] = defaultdict(set)
    for e in entries:
        teacher = e.recorded_by or UNKNOWN_TEACHER
        totals[teacher] += e.points
        touched[teacher].add(e.student_id)

    stats = [
        TeacherActivity(teacher=name, total_points=total, unique_students=len(touched[name]))
        for name, total in totals.items()
    ]
    stats.sort(key=lambda t: t.total_points, reverse=True)
    return stats


def weak_links(students: Sequence[Student], entries: Iterable[PointLedgerEntry]) -> tuple[float, list[StudentScore]]:
    """Students at or below half the class average, lowest first.

    Returns (class_average, flagged). An idle class (average 0) flags nobody.
    """
    if not students:
        return 0.0, []

    totals: dict[int, int] = defaultdict(int)
    for e in entries:
        totals[e.student_id] += e.points

    scores = [StudentScore(student=s, total=totals.get(s.student_id, 0)) for s in students]
    average = sum(s.total for s in scores) / len(scores)
    if average == 0:
        return 0.0, []

    threshold = average * WEAK_LINK_RATIO
    flagged = [s for s in scores if s.total <= threshold]
    flagged.sort(key=lambda s: s.total)
    return average, flagged


class FairnessService:
    """Read-side analytics over one month of the ledger."""

    def __init__(self, students: StudentRepository, ledger: LedgerRepository):
        self._students = students
        self._ledger = ledger

    def build_report(self, *, month: int, year: int, age_group: Optional[AgeGroup] = None) -> FairnessReport:
        start, end = month_bounds(month, year)
        students = list(self._students.list_all(age_group=age_group))
        entries = list(self._ledger.list_active(start_date=start, end_date=end))

        if age_group is not None:
            member_ids = {s.student_id for s in students}
            entries = [e for e in entries if e.student_id in member_ids]

        average, flagged = weak_links(students, entries)
        return FairnessReport(
            class_average=average,
            threshold=average * WEAK_LINK_RATIO,
            teachers=teacher_activity(entries),
            weak_links=flagged,
        )
