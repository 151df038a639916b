"""Create the attendance database and apply ``database/schema.sql``.

Usage: ``APP_ENV=production python scripts/init_db.py``
"""

from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.attendance_tracker.attendance_tracker.core.logging import configure_logging
from src.attendance_tracker.attendance_tracker.database.bootstrap import apply_schema, list_tables

logger = logging.getLogger("init_db")


def main() -> int:
    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    db_config = dict(settings.DB_CONFIG)
    count = apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    logger.info(
        "Schema ready: settings=%s statements=%d tables=%s",
        settings_module,
        count,
        ",".join(list_tables(db_config)),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
