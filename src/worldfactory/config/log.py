"""Logging setup for applications embedding the factory.

Library modules only create loggers; handlers are the application's choice.
"""

from __future__ import annotations

import logging

from worldfactory.config.settings import FactorySettings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: FactorySettings | None = None) -> logging.Logger:
    """Attach a stream handler to the package logger at the configured level.

    Calling it again only updates the level.

    Returns:
        The ``worldfactory`` package logger.
    """
    settings = settings or FactorySettings()
    logger = logging.getLogger("worldfactory")
    logger.setLevel(settings.log_level.upper())
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
