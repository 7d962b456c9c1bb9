"""Configuration settings using Pydantic Settings.

Provides typed factory configuration with environment variable support.

Usage:
    from worldfactory.config import FactorySettings

    # Load from environment variables (WORLD_FACTORY_*)
    settings = FactorySettings()

    # Or override with explicit values
    settings = FactorySettings(world_salt=7, default_max_actions=50)
"""

from __future__ import annotations

try:
    from pydantic import Field
    from pydantic_settings import BaseSettings, SettingsConfigDict
except ImportError as e:
    raise ImportError(
        "pydantic-settings is required for config module. "
        "Install with: pip install pydantic-settings"
    ) from e


class FactorySettings(BaseSettings):  # type: ignore[misc]
    """Configuration for a WorldFactory.

    Attributes:
        factory_address: Address the factory acts as when operating on worlds.
        world_salt: Fixed parameter mixed into every provisioned world address.
        default_max_actions: Budget used for configs whose payload omits max_actions.
        genesis_block: Block number LocalChain starts counting from.
        log_level: Level applied by configure_logging().

    Environment Variables:
        WORLD_FACTORY_FACTORY_ADDRESS
        WORLD_FACTORY_WORLD_SALT
        WORLD_FACTORY_DEFAULT_MAX_ACTIONS
        WORLD_FACTORY_GENESIS_BLOCK
        WORLD_FACTORY_LOG_LEVEL
    """

    model_config = SettingsConfigDict(
        env_prefix="WORLD_FACTORY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    factory_address: int = Field(default=0xFAC7, gt=0)
    world_salt: int = Field(default=0, ge=0)
    default_max_actions: int = Field(default=20, ge=1)
    genesis_block: int = Field(default=1, ge=0)
    log_level: str = "INFO"
