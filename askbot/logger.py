"""Logging setup shared by the example bot and the prompt registry."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Attach a rotating file handler and a console handler to the root logger.

    Does nothing when the root logger already has handlers, so embedding
    applications keep their own configuration.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    Path(settings.LOG_FILE).parent.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(LOG_FORMAT)

    file_handler = RotatingFileHandler(
        settings.LOG_FILE,
        maxBytes=2_000_000,
        backupCount=5,
    )
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)

    root.setLevel((level or settings.LOG_LEVEL).upper())
    root.addHandler(file_handler)
    root.addHandler(console_handler)

    # aiogram logs every processed update at INFO
    logging.getLogger("aiogram.event").setLevel(logging.WARNING)


logger = logging.getLogger("askbot")
