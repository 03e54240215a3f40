from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ActivitySchedule:
    activity_id: int
    sunday_index: int
    title: str
    is_active: bool = True

    def to_dict(self) -> dict:
        return {
            "activity_id": self.activity_id,
            "sunday_index": self.sunday_index,
            "title": self.title,
            "is_active": self.is_active,
        }
