from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import Container, build_container
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .attendance.controller import register as register_attendance
from .auth.controller import register as register_auth
from .network.controller import register as register_network_gate
from .notifications.controller import register as register_notifications
from .reports.controller import register as register_reports
from .students.controller import register as register_students

ROOT_DIR = Path(__file__).resolve().parents[2]


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__, template_folder=str(ROOT_DIR / "templates"), static_folder=str(ROOT_DIR / "static"))

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=logging.DEBUG if app.config["DEBUG"] else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        app.logger.info(
            "[campus-attendance] settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config, schema_path=ROOT_DIR / "database" / "schema.sql")
            app.logger.info("[campus-attendance] schema ready (tables=%d)", len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            apply_seed_sql(db_config, seed_path=ROOT_DIR / "database" / "seed.sql")
            app.logger.info("[campus-attendance] demo seed ready")

        container = build_container(settings)

    app.extensions["campus_attendance"] = container

    register_network_gate(app, container)
    register_auth(app, container)
    register_attendance(app, container)
    register_students(app, container)
    register_reports(app, container)
    register_notifications(app, container)

    return app
