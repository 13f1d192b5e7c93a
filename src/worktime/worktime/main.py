from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import Container, build_container
from .core.constants import DEFAULT_ACK_WINDOW_MINUTES, DEFAULT_SLA_HOURS, URGENT_THRESHOLD_MINUTES
from .database.bootstrap import apply_schema, apply_sql_file, list_tables
from .sla.controller import register as register_sla
from .tasks.controller import register as register_tasks

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
SQL_DIR = Path(__file__).resolve().parents[3] / "database"

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)

    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"), format=LOG_FORMAT)

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["DEFAULT_SLA_HOURS"] = float(getattr(settings, "DEFAULT_SLA_HOURS", DEFAULT_SLA_HOURS))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        # Startup info so a wrong APP_ENV / DB_NAME shows up in the first log lines.
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config, schema_path=SQL_DIR / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            apply_sql_file(db_config, path=SQL_DIR / "seed.sql")
            logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            ack_window_minutes=int(getattr(settings, "ACK_WINDOW_MINUTES", DEFAULT_ACK_WINDOW_MINUTES)),
            urgent_threshold_minutes=int(getattr(settings, "URGENT_THRESHOLD_MINUTES", URGENT_THRESHOLD_MINUTES)),
        )

    register_sla(app, container)
    register_tasks(app, container)

    return app
