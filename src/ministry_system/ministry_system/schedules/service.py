from __future__ import annotations

import math
from datetime import date
from typing import Optional

from ..common.validators import require_between, require_bool, require_int, require_non_empty
from ..core.constants import DEFAULT_ACTIVITY_TITLE, SUNDAY_ACTIVITY_FALLBACKS
from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from .repository import ActivityScheduleRepository


def sunday_index(day: date) -> int:
    """Which Sunday of the month `day` falls in (1..5)."""
    return math.ceil(day.day / 7)


class ActivityScheduleService:
    def __init__(self, schedule: ActivityScheduleRepository):
        self._schedule = schedule

    def current_activity(self, *, today: Optional[date] = None) -> dict:
        today = today or date.today()
        index = sunday_index(today)
        row = self._schedule.get_for_index(index)
        title = row.title if row else SUNDAY_ACTIVITY_FALLBACKS.get(index, DEFAULT_ACTIVITY_TITLE)
        return {"sunday_index": index, "title": title}

    def list_schedule(self):
        return self._schedule.list_all()

    def assign(self, *, current_role: Role, sunday_index: int, title: str, is_active: bool = True) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can edit the activity schedule")

        index = int(require_between(require_int(sunday_index, "Sunday index"), "Sunday index", 1, 5))
        title = require_non_empty(title, "Title")
        active = require_bool(is_active, "Active")
        return self._schedule.upsert(sunday_index=index, title=title, is_active=active)
