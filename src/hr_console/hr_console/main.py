from __future__ import annotations

import logging

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module, load_settings

from .container import build_container
from .attendance.controller import register as register_attendance
from .tasks.controller import register as register_tasks

logger = logging.getLogger(__name__)


def create_app(**overrides) -> Flask:
    """Build the console app; ``overrides`` go to ``build_container`` (tests pass a transport)."""
    load_dotenv(override=False)
    settings = load_settings()

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    backend_config = getattr(settings, "BACKEND_CONFIG")
    logger.info("settings=%s backend=%s", get_settings_module(), backend_config.get("base_url"))

    container = build_container(
        backend_config=backend_config,
        map_api_key=getattr(settings, "MAP_API_KEY", None),
        geolocation_timeout=float(getattr(settings, "GEOLOCATION_TIMEOUT", 15.0)),
        **overrides,
    )
    app.extensions["hr_console"] = container

    register_attendance(app, container)
    register_tasks(app, container)

    return app
