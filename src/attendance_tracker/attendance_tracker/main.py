from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.constants import DEFAULT_FULL_DAY_HOURS, DEFAULT_GEOLOCATION_TIMEOUT_SECONDS
from .core.logging import configure_logging
from .database.bootstrap import apply_schema, list_tables
from .leaves.controller import register as register_leaves
from .messages.controller import register as register_messages
from .reports.controller import register as register_reports

logger = logging.getLogger(__name__)


def create_app(container: Container | None = None) -> Flask:
    """Application factory.

    ``container`` lets callers (tests, scripts) inject prebuilt services; by
    default everything is wired against MySQL from the active settings module.
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "Starting with settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            geolocation_timeout=float(getattr(settings, "GEOLOCATION_TIMEOUT_SECONDS", DEFAULT_GEOLOCATION_TIMEOUT_SECONDS)),
            full_day_hours=float(getattr(settings, "FULL_DAY_HOURS", DEFAULT_FULL_DAY_HOURS)),
        )

    register_attendance(app, container)
    register_reports(app, container)
    register_leaves(app, container)
    register_messages(app, container)

    app.extensions["attendance_container"] = container
    return app
