from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from ..core.constants import DEFAULT_ALLOW_DUPLICATE_POINTS, DEFAULT_MATCH_THRESHOLD

GLOBAL_SETTINGS_ID = "global-settings"


@dataclass(frozen=True)
class AppSettings:
    """Runtime settings shared by the attendance, points and recognition engines."""

    settings_id: str = GLOBAL_SETTINGS_ID
    match_threshold: float = DEFAULT_MATCH_THRESHOLD
    auto_checkout_time: time = time(13, 0)
    allow_duplicate_points: bool = DEFAULT_ALLOW_DUPLICATE_POINTS

    def to_dict(self) -> dict:
        return {
            "match_threshold": self.match_threshold,
            "auto_checkout_time": self.auto_checkout_time.strftime("%H:%M"),
            "allow_duplicate_points": self.allow_duplicate_points,
        }
