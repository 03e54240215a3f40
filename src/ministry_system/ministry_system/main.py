from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .assignments.controller import register as register_assignments
from .attendance.controller import register as register_attendance
from .audit.controller import register as register_audit
from .common.web import register_error_handlers
from .container import build_container
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .fairness.controller import register as register_fairness
from .followups.controller import register as register_followups
from .leaderboard.controller import register as register_leaderboard
from .points.controller import register as register_points
from .portal.controller import register as register_portal
from .recognition.controller import register as register_recognition
from .schedules.controller import register as register_schedules
from .settings.controller import register as register_settings
from .students.controller import register as register_students
from .users.controller import register as register_users
from .users.service import build_credentials

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))

    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
        logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
        logger.info("default rules, schedule and settings seeded")

    container = build_container(
        db_config=db_config,
        credentials=build_credentials(
            admin_username=getattr(settings, "ADMIN_USERNAME", "admin"),
            admin_password=getattr(settings, "ADMIN_PASSWORD", ""),
            teacher_password=getattr(settings, "TEACHER_PASSWORD", ""),
        ),
        gemini_api_key=getattr(settings, "GEMINI_API_KEY", ""),
        gemini_model=getattr(settings, "GEMINI_MODEL", "gemini-2.5-flash"),
    )
    container.settings_service.load()

    register_error_handlers(app)
    register_users(app, container)
    register_students(app, container)
    register_points(app, container)
    register_attendance(app, container)
    register_leaderboard(app, container)
    register_fairness(app, container)
    register_followups(app, container)
    register_recognition(app, container)
    register_schedules(app, container)
    register_assignments(app, container)
    register_settings(app, container)
    register_audit(app, container)
    register_portal(app, container)

    return app
