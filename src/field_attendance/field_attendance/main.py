from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.http import register_error_handlers
from .container import Container, build_container
from .database.bootstrap import apply_schema, apply_seed_sql, missing_tables
from .security import middleware
from .attendance.controller import register as register_attendance
from .employees.controller import register as register_employees
from .locations.controller import register as register_locations
from .realtime.endpoint import register as register_realtime
from .reference.controller import register as register_reference
from .reports.controller import register as register_reports
from .requests.controller import register as register_requests
from .security.controller import register as register_security
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def build_app(container: Container, settings: Any = None) -> Flask:
    """Assemble the Flask app around an already built container."""
    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY", "dev-secret-key")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["MAX_CONTENT_LENGTH"] = int(getattr(settings, "MAX_UPLOAD_BYTES", 5 * 1024 * 1024)) * 4

    middleware.install(app, container.tokens)
    register_error_handlers(app)

    register_users(app, container)
    register_security(app, container)
    register_reference(app, container)
    register_employees(app, container)
    register_attendance(app, container)
    register_requests(app, container)
    register_reports(app, container)
    register_locations(app, container)
    register_realtime(app, container)

    app.extensions["field_attendance.container"] = container
    return app


def create_app() -> Flask:
    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s",
    )

    db_config = getattr(settings, "DB_CONFIG")
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if getattr(settings, "AUTO_INIT_DB", False):
        apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
        missing = missing_tables(db_config)
        if missing:
            logger.warning("Schema applied but tables are missing: %s", ", ".join(missing))
    if getattr(settings, "AUTO_SEED_DB", False):
        apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")

    container = build_container(settings)
    app = build_app(container, settings)

    if container.relay is not None:
        container.relay.start()

    return app
