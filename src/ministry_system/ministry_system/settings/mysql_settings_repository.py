from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, normalize_mysql_time
from .model import AppSettings
from .repository import SettingsRepository


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self) -> Optional[AppSettings]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT settings_id, match_threshold, auto_checkout_time, allow_duplicate_points
                FROM app_settings
                LIMIT 1
                """
            )
            r = fetchone(cur)
            if not r:
                return None
            return AppSettings(
                settings_id=r["settings_id"],
                match_threshold=float(r["match_threshold"]),
                auto_checkout_time=normalize_mysql_time(r["auto_checkout_time"]),
                allow_duplicate_points=bool(r["allow_duplicate_points"]),
            )

    def upsert(self, settings: AppSettings) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO app_settings(settings_id, match_threshold, auto_checkout_time, allow_duplicate_points)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    match_threshold=VALUES(match_threshold),
                    auto_checkout_time=VALUES(auto_checkout_time),
                    allow_duplicate_points=VALUES(allow_duplicate_points)
                """,
                (
                    settings.settings_id,
                    settings.match_threshold,
                    settings.auto_checkout_time,
                    int(settings.allow_duplicate_points),
                ),
            )
