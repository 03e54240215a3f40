from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime
from typing import Callable, Optional

from ..common.datetime_utils import in_month, month_bounds
from ..core.constants import EPOCH
from ..core.enums import AgeGroup
from ..points.repository import LedgerRepository
from ..students.repository import StudentRepository
from .model import LeaderboardEntry

DateFilter = Callable[[date], bool]


def ranking_key(entry: LeaderboardEntry):
    """Most points first, then most recent activity, then name."""
    return (
        -entry.total_points,
        -(entry.last_point_date - EPOCH).total_seconds(),
        entry.student.full_name.casefold(),
        entry.student.full_name,
    )


class LeaderboardService:
    def __init__(self, students: StudentRepository, ledger: LedgerRepository):
        self._students = students
        self._ledger = ledger

    def get_leaderboard(
        self,
        age_group: Optional[AgeGroup] = None,
        date_filter: Optional[DateFilter] = None,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[LeaderboardEntry]:
        students = self._students.list_all(age_group=age_group)
        entries = self._ledger.list_active(start_date=start_date, end_date=end_date)

        totals: dict[int, int] = defaultdict(int)
        last_seen: dict[int, datetime] = {}
        for e in entries:
            if date_filter is not None and not date_filter(e.entry_date):
                continue
            totals[e.student_id] += e.points
            if e.student_id not in last_seen or e.created_at > last_seen[e.student_id]:
                last_seen[e.student_id] = e.created_at

        board = [
            LeaderboardEntry(
                student=s,
                total_points=totals.get(s.student_id, 0),
                last_point_date=last_seen.get(s.student_id, EPOCH),
            )
            for s in students
        ]
        board.sort(key=ranking_key)
        return board

    def get_monthly_leaderboard(
        self, month: int, year: int, age_group: Optional[AgeGroup] = None
    ) -> list[LeaderboardEntry]:
        start, end = month_bounds(month, year)
        return self.get_leaderboard(age_group, in_month(month, year), start_date=start, end_date=end)

    def rank_of(self, student_id: int, *, age_group: Optional[AgeGroup] = None) -> Optional[int]:
        for position, entry in enumerate(self.get_leaderboard(age_group), start=1):
            if entry.student.student_id == int(student_id):
                return position
        return None
