from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .alpha.controller import register as register_alpha
from .attendance.controller import register as register_attendance
from .common.http import register_error_handlers
from .container import Settings, build_container
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_admin, list_tables
from .employees.controller import register as register_employees
from .leave.controller import register as register_leave
from .overtime.controller import register as register_overtime
from .payroll.controller import register as register_payroll
from .schedules.controller import register as register_schedules
from .stats.controller import register as register_stats
from .subscription.controller import register as register_subscription
from .users.controller import register as register_users

log = logging.getLogger(__name__)

_DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def create_app() -> Flask:
    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    db_config = getattr(settings, "DB_CONFIG")

    log.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if getattr(settings, "AUTO_INIT_DB", False):
        apply_schema(db_config, schema_path=_DATABASE_DIR / "schema.sql")
        log.info("Schema ready (tables=%s)", len(list_tables(db_config)))
    if getattr(settings, "AUTO_SEED_DB", False):
        apply_seed_sql(db_config, seed_path=_DATABASE_DIR / "seed.sql")
        ensure_demo_admin(db_config)
        log.info("Demo seed ready")

    container = build_container(db_config=db_config, settings=Settings.from_module(settings))

    register_error_handlers(app)
    register_users(app, container)
    register_employees(app, container)
    register_schedules(app, container)
    register_attendance(app, container)
    register_leave(app, container)
    register_overtime(app, container)
    register_payroll(app, container)
    register_alpha(app, container)
    register_subscription(app, container)
    register_stats(app, container)

    @app.get("/api/health", endpoint="health")
    def health():
        return {"status": "ok"}

    return app
