from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ActivitySchedule


class ActivityScheduleRepository(Protocol):
    def get_for_index(self, sunday_index: int) -> Optional[ActivitySchedule]:
        """Active activity for the n-th Sunday of a month, if configured."""

        raise NotImplementedError

    def list_all(self) -> Sequence[ActivitySchedule]:
        raise NotImplementedError

    def upsert(self, *, sunday_index: int, title: str, is_active: bool = True) -> int:
        raise NotImplementedError
