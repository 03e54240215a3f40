from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from ..common.datetime_utils import parse_hhmm
from ..common.validators import require_between, require_bool
from ..core.constants import MAX_MATCH_THRESHOLD, MIN_MATCH_THRESHOLD
from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from .model import AppSettings
from .repository import SettingsRepository

logger = logging.getLogger(__name__)


class SettingsService:
    """Holds AppSettings for the process.

    Lifecycle: `load()` reads the stored row (defaults when missing), `current()`
    serves the cached value, `refresh()` re-reads and `update()` writes through.
    """

    def __init__(self, settings: SettingsRepository):
        self._settings = settings
        self._cached: Optional[AppSettings] = None

    def load(self) -> AppSettings:
        stored = self._settings.get()
        if stored is None:
            logger.info("No app_settings row found, using defaults")
            stored = AppSettings()
        self._cached = stored
        return stored

    def current(self) -> AppSettings:
        if self._cached is None:
            return self.load()
        return self._cached

    def refresh(self) -> AppSettings:
        return self.load()

    def update(
        self,
        *,
        current_role: Role,
        match_threshold: Optional[float] = None,
        auto_checkout_time: Optional[str] = None,
        allow_duplicate_points: Optional[bool] = None,
    ) -> AppSettings:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only admins can change settings")

        updated = self.current()
        if match_threshold is not None:
            threshold = require_between(match_threshold, "Match threshold", MIN_MATCH_THRESHOLD, MAX_MATCH_THRESHOLD)
            updated = replace(updated, match_threshold=threshold)
        if auto_checkout_time is not None:
            updated = replace(updated, auto_checkout_time=parse_hhmm(auto_checkout_time))
        if allow_duplicate_points is not None:
            allow = require_bool(allow_duplicate_points, "Allow duplicate points")
            updated = replace(updated, allow_duplicate_points=allow)

        self._settings.upsert(updated)
        return self.refresh()
