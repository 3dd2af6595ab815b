from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, request

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.rate_limit import build_limiter
from .common.responses import error_response
from .container import Container, build_container
from .core.constants import DEFAULT_TIMEZONE, DEFAULT_VALIDATE_RATE_LIMIT
from .core.exceptions import DomainError
from .database.bootstrap import apply_schema, list_tables
from .payroll.controller import register as register_payroll

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["API_SECRET"] = getattr(settings, "API_SECRET", None)
    app.config["CRON_SECRET"] = getattr(settings, "CRON_SECRET", None)
    app.config["VALIDATE_RATE_LIMIT"] = getattr(settings, "VALIDATE_RATE_LIMIT", DEFAULT_VALIDATE_RATE_LIMIT)
    app.config["RATELIMIT_STORAGE_URI"] = getattr(settings, "RATELIMIT_STORAGE_URI", "memory://")
    default_timezone = getattr(settings, "DEFAULT_TIMEZONE", DEFAULT_TIMEZONE)

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(db_config=db_config, default_timezone=default_timezone)

    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        logger.info("%s rejected: %s (%s)", request.path, exc.code, exc)
        return error_response(exc)

    limiter = build_limiter(app)
    register_attendance(app, container, limiter=limiter)
    register_payroll(app, container)

    return app
