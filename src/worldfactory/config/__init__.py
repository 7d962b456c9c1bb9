"""Configuration module using Pydantic Settings.

Usage:
    from worldfactory.config import FactorySettings, configure_logging

    settings = FactorySettings(default_max_actions=50)
    configure_logging(settings)
"""

from worldfactory.config.log import configure_logging
from worldfactory.config.settings import FactorySettings

__all__ = [
    "FactorySettings",
    "configure_logging",
]
