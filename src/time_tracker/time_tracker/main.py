from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.http import register_error_handlers
from .common.logging_setup import configure_logging
from .container import Container, build_container
from .core.constants import DEFAULT_SESSION_HOURS
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DBConfig

from .approvals.controller import register as register_approvals
from .projects.controller import register as register_projects
from .reporting.controller import register as register_reporting
from .teams.controller import register as register_teams
from .time_entries.controller import register as register_time_entries
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    Pass a prepared ``container`` to run against other repositories (tests do);
    otherwise one is built on MySQL from the selected settings module.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["SESSION_HOURS"] = int(getattr(settings, "SESSION_HOURS", DEFAULT_SESSION_HOURS))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info("settings=%s db=%s", settings_module, DBConfig.from_dict(db_config).describe())
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        container = build_container(db_config=db_config)

    app.extensions["time_tracker"] = container

    register_error_handlers(app)
    register_users(app, container)
    register_teams(app, container)
    register_time_entries(app, container)
    register_approvals(app, container)
    register_reporting(app, container)
    register_projects(app, container)

    return app
