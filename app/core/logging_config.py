# app/core/logging_config.py

"""
Console logging for the 'app' logger hierarchy.

Modules log through `logging.getLogger(__name__)`; setup_logging() is called
once from the application lifespan (and the ARQ worker startup) to attach a
single stream handler to the 'app' logger.
"""

import logging

from app.core.config import settings

# Log format with ISO-like timestamp including milliseconds
LOG_FORMAT = "%(asctime)s.%(msecs)03d - %(name)s - %(funcName)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

LOGGER_NAME = "app"


def setup_logging(level: str | None = None) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel((level or settings.LOG_LEVEL).upper())

    # Avoid duplicate handlers when called more than once (tests, reload)
    if not any(getattr(h, "_app_console", False) for h in logger.handlers):
        formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        console_handler._app_console = True
        logger.addHandler(console_handler)

    logger.propagate = False
    return logger
