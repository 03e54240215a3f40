from __future__ import annotations

import logging
from typing import Optional

from ..ai.service import MentorService, Story
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..leaderboard.service import LeaderboardService
from ..points.service import PointsService
from ..students.repository import StudentRepository
from ..students.service import StudentService
from .repository import StoryHistoryRepository

logger = logging.getLogger(__name__)


class PortalService:
    """Parent portal: read-only view of one child plus AI content."""

    def __init__(
        self,
        students: StudentRepository,
        points: PointsService,
        leaderboard: LeaderboardService,
        mentor: MentorService,
        stories: StoryHistoryRepository,
    ):
        self._student_service = StudentService(students)
        self._points = points
        self._leaderboard = leaderboard
        self._mentor = mentor
        self._stories = stories

    def _rank(self, student) -> int:
        rank: Optional[int] = self._leaderboard.rank_of(student.student_id, age_group=student.age_group)
        return rank or 0

    def profile(self, student_id: int) -> dict:
        student = self._student_service.get(student_id)
        history = self._points.recent_history(student.student_id, limit=DEFAULT_HISTORY_LIMIT)
        return {
            "student": student.to_dict(),
            "total_points": self._points.total_points(student.student_id),
            "rank": self._rank(student),
            "history": [e.to_dict() for e in history],
        }

    def advice(self, student_id: int) -> str:
        student = self._student_service.get(student_id)
        return self._mentor.advice(
            self._points.total_points(student.student_id),
            self._rank(student),
            student.age_group.value,
            student.first_name,
        )

    def story(self, student_id: int) -> Story:
        student = self._student_service.get(student_id)
        past = list(self._stories.list_topics(student.student_id))
        story = self._mentor.story(rank=self._rank(student), age_group=student.age_group.value, past_topics=past)
        self._stories.add_topic(student_id=student.student_id, topic=story.topic)
        logger.info("Story '%s' generated for student %s", story.topic, student.student_id)
        return story
