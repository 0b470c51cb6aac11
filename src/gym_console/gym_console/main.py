from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def load_settings():
    load_dotenv(override=False)
    return importlib.import_module(get_settings_module())


def configure_logging(settings) -> None:
    level = str(getattr(settings, "LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def create_app(container: Optional[Container] = None) -> Flask:
    settings = load_settings()
    configure_logging(settings)

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    supabase_config = getattr(settings, "SUPABASE_CONFIG")
    if container is None:
        container = build_container(supabase_config=supabase_config)
    logger.info("[gym-console] settings=%s supabase=%s", settings.__name__, supabase_config.get("url"))

    register_users(app, container)
    register_attendance(app, container)
    return app
