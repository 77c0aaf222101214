from __future__ import annotations

import atexit
import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from flask_jwt_extended import JWTManager

from .assignments.controller import register as register_assignments
from .attendance.controller import register as register_attendance
from .classes.controller import register as register_classes
from .common.http import register_error_handlers
from .config import get_settings_module
from .container import Container, build_container
from .dashboard.controller import register as register_dashboard
from .database.bootstrap import apply_schema, ensure_demo_users, list_tables
from .reminders.controller import register as register_reminders
from .sync.controller import register as register_sync
from .users.controller import register as register_users
from .zones.controller import register as register_zones

logger = logging.getLogger(__name__)

_DATABASE_DIR = Path(__file__).resolve().parents[2] / "database"


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["JWT_SECRET_KEY"] = getattr(settings, "JWT_SECRET_KEY")
    app.config["JWT_ACCESS_TOKEN_EXPIRES"] = getattr(settings, "JWT_ACCESS_TOKEN_EXPIRES")
    JWTManager(app)

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        remote_db_config = getattr(settings, "REMOTE_DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=_DATABASE_DIR / "schema.sql")
            apply_schema(remote_db_config, schema_path=_DATABASE_DIR / "remote_schema.sql")
            ensure_demo_users(db_config)
            logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            remote_db_config=remote_db_config,
            late_after_minutes=getattr(settings, "LATE_AFTER_MINUTES", None),
            check_interval_seconds=int(getattr(settings, "ATTENDANCE_CHECK_INTERVAL_SECONDS", 60)),
            location_max_age_seconds=int(getattr(settings, "LOCATION_MAX_AGE_SECONDS", 300)),
            sync_workers=int(getattr(settings, "SYNC_WORKERS", 2)),
        )

        if bool(getattr(settings, "AUTO_ATTENDANCE_ENABLED", False)):
            container.checker.start()
        atexit.register(container.shutdown)

    app.extensions["yooh"] = container

    register_error_handlers(app)
    register_users(app, container)
    register_dashboard(app, container)
    register_attendance(app, container)
    register_zones(app, container)
    register_classes(app, container)
    register_assignments(app, container)
    register_reminders(app, container)
    register_sync(app, container)

    return app


def run() -> None:
    app = create_app()
    app.run(host="0.0.0.0", port=5000, debug=app.config["DEBUG"], use_reloader=False)
