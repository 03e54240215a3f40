from __future__ import annotations

from typing import Protocol, Sequence


class StoryHistoryRepository(Protocol):
    def list_topics(self, student_id: int) -> Sequence[str]:
        raise NotImplementedError

    def add_topic(self, *, student_id: int, topic: str) -> int:
        raise NotImplementedError
