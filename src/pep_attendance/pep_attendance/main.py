from __future__ import annotations

import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module, load_settings

from .container import build_container
from .fetch.base import SpreadsheetFetcher
from .students.controller import register as register_students


def create_app(*, settings: Optional[dict] = None, fetcher: Optional[SpreadsheetFetcher] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    if settings is None:
        settings = load_settings(settings_module)

    app.secret_key = settings.get("SECRET_KEY")
    app.config["DEBUG"] = bool(settings.get("DEBUG", False))
    app.config["TESTING"] = bool(settings.get("TESTING", False))

    logging.basicConfig(
        level=logging.DEBUG if app.config["DEBUG"] else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger = logging.getLogger("pep_attendance")
    logger.info(
        "settings=%s source=%s tz=%s",
        settings_module,
        settings.get("SPREADSHEET_FILE") or settings.get("SPREADSHEET_URL") or "<unset>",
        settings.get("TIMEZONE"),
    )

    container = build_container(settings=settings, fetcher=fetcher)
    app.extensions["pep_attendance"] = container

    register_students(app, container)

    if settings.get("AUTO_START_SCHEDULER", False):
        container.scheduler.start()

    return app


def main() -> None:
    app = create_app()
    app.run(host="0.0.0.0", port=5000, use_reloader=False)


if __name__ == "__main__":
    main()
