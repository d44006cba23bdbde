"""Configuration loading and validation."""

from .loader import load_config
from .schema import (
    BotConfig,
    DiscordConfig,
    FileLoggingConfig,
    GitHubConfig,
    HealthConfig,
    LoggingConfig,
)

__all__ = [
    # Loader
    "load_config",
    # Root config
    "BotConfig",
    # Sections
    "DiscordConfig",
    "GitHubConfig",
    "HealthConfig",
    "LoggingConfig",
    "FileLoggingConfig",
]
