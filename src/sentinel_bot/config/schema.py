"""Pydantic models for configuration schema."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DiscordConfig(BaseModel):
    """Discord-specific configuration."""

    token: str
    client_id: int = Field(..., gt=0, description="Application (client) ID")
    guild_id: int = Field(..., gt=0, description="Guild the commands are registered in")

    @field_validator("token")
    @classmethod
    def validate_token(cls, v: str) -> str:
        """Reject empty or unsubstituted bot tokens."""
        v = v.strip()
        if not v:
            raise ValueError("Discord bot token must not be empty")
        if v.startswith("${"):
            raise ValueError("Discord bot token was not substituted from the environment")
        return v


class GitHubConfig(BaseModel):
    """GitHub REST API configuration."""

    token: str | None = None
    api_url: str = "https://api.github.com"
    timeout: float = Field(30.0, gt=0, le=300)
    user_agent: str = "sentinel-bot"

    @field_validator("token")
    @classmethod
    def empty_token_is_none(cls, v: str | None) -> str | None:
        """Treat a blank token as "no write credential"."""
        if v is None or not v.strip():
            return None
        return v.strip()

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Require an absolute http(s) URL without a trailing slash."""
        if not v.startswith(("https://", "http://")):
            raise ValueError(f"Invalid GitHub API URL: {v}")
        return v.rstrip("/")


class FileLoggingConfig(BaseModel):
    """File logging configuration."""

    enabled: bool = False
    path: Path = Path("/var/log/sentinel-bot/bot.log")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "json"
    file: FileLoggingConfig = FileLoggingConfig()


class HealthConfig(BaseModel):
    """Liveness endpoint configuration."""

    enabled: bool = True
    host: str = "0.0.0.0"  # noqa: S104
    port: int = Field(8080, ge=1, le=65535)


class BotConfig(BaseSettings):
    """Root configuration for Sentinel."""

    discord: DiscordConfig
    github: GitHubConfig = GitHubConfig()
    logging: LoggingConfig = LoggingConfig()
    health: HealthConfig = HealthConfig()
    environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
    )
