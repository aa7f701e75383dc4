from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .attendance.controller import register as register_attendance
from .attendance.tracker_config import TrackerConfig
from .config import get_settings_module
from .container import Container, build_container
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DBConfig, DatabaseConnection
from .lectures.controller import register as register_lectures

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )
    logger.info("Starting with settings=%s", settings_module)

    if container is None:
        # Fails fast on a missing or malformed token key.
        tracker_config = TrackerConfig.from_settings(settings)
        db_config = getattr(settings, "DB_CONFIG")

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
            apply_schema(conn)
            logger.info("Schema ready (tables=%s)", len(list_tables(conn)))

        container = build_container(db_config=db_config, tracker_config=tracker_config)

    register_attendance(app, container)
    register_lectures(app, container)

    return app
