from __future__ import annotations

import atexit
import importlib
import logging

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .backups.controller import register as register_backups
from .container import build_container
from .tenants.controller import register as register_tenants

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    # APScheduler logs every job execution at INFO.
    logging.getLogger("apscheduler").setLevel(logging.WARNING)


def create_app(*, start_scheduler: bool | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    storage_config = getattr(settings, "STORAGE_CONFIG")

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    logger.info(
        "settings=%s data_dir=%s backup_dir=%s",
        settings_module,
        storage_config["data_dir"],
        storage_config["backup_dir"],
    )

    container = build_container(storage_config=storage_config)
    app.extensions["contribution_tracker"] = container

    register_backups(app, container)
    register_tenants(app, container)

    if start_scheduler is None:
        start_scheduler = bool(getattr(settings, "BACKUP_SCHEDULE_ENABLED", False))
    if start_scheduler:
        container.backup_scheduler.start(float(getattr(settings, "BACKUP_INTERVAL_MINUTES", 60)))
        atexit.register(container.backup_scheduler.stop)

    return app
