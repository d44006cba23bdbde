"""Structured logging for Sentinel.

Every event goes through structlog, then the stdlib handlers (stderr and
an optional file). Before rendering, each event is scrubbed of Discord and
GitHub credentials: token-shaped strings are caught by the pattern list in
``utils/security.py``, and the tokens the bot was configured with are
redacted verbatim wherever they appear.

The dispatcher binds per-interaction fields (command, subcommand, user and
interaction ids) with ``bind_context`` so every event a handler logs can be
correlated back to one slash-command invocation.
"""

from __future__ import annotations

import logging
import re
import sys
from collections.abc import Iterable, MutableMapping
from pathlib import Path
from typing import Any, cast

import structlog

from sentinel_bot._version import __version__
from sentinel_bot.utils.security import SecretRedactor

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("json", "console")

# Shorter values would redact ordinary words
MIN_CONFIGURED_SECRET_LENGTH = 8

# Loggers of the libraries that talk to Discord and GitHub, with the
# lowest level they may emit at
LIBRARY_LOG_FLOORS = {
    "discord": logging.INFO,
    "httpx": logging.WARNING,
    "aiohttp.access": logging.WARNING,
}

_redactor = SecretRedactor()


def install_secrets(secrets: Iterable[str | None]) -> None:
    """Redact these configured credentials verbatim from every log event."""
    global _redactor
    patterns = [
        (re.escape(secret), "Configured credential")
        for secret in secrets
        if secret and len(secret) >= MIN_CONFIGURED_SECRET_LENGTH
    ]
    _redactor = SecretRedactor(custom_patterns=patterns)


def sanitize_log_value(value: Any) -> Any:
    """Redact secrets from a log value, descending into dicts, lists and tuples."""
    if isinstance(value, str):
        return _redactor.redact(value)
    if isinstance(value, dict):
        return {k: sanitize_log_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return type(value)(sanitize_log_value(v) for v in value)
    return value


def secret_sanitizer(
    logger: logging.Logger,
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    return cast(MutableMapping[str, Any], sanitize_log_value(event_dict))


def add_service_info(
    logger: logging.Logger,
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    event_dict["service"] = "sentinel-bot"
    event_dict["version"] = __version__
    return event_dict


def configure_logging(
    level: str = "INFO",
    log_format: str = "json",
    file_path: Path | str | None = None,
    secrets: Iterable[str | None] = (),
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        level: One of ``LOG_LEVELS`` (case-insensitive)
        log_format: ``"json"`` for production, ``"console"`` for a terminal
        file_path: Also write events to this file when given
        secrets: Configured tokens to redact verbatim (None entries ignored)

    Raises:
        ValueError: If the level or format is unknown

    Example:
        configure_logging("DEBUG", "console", secrets=[config.discord.token])
    """
    level = level.upper()
    log_format = log_format.lower()
    if level not in LOG_LEVELS:
        raise ValueError(f"Unknown log level: {level}")
    if log_format not in LOG_FORMATS:
        raise ValueError(f"Unknown log format: {log_format}")

    install_secrets(secrets)
    numeric_level: int = getattr(logging, level)

    renderer: Any
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True, exception_formatter=structlog.dev.plain_traceback
        )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_service_info,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            # After format_exc_info, so tracebacks are scrubbed too
            secret_sanitizer,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    file_error: OSError | None = None
    if file_path:
        file_path = Path(file_path)
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(file_path))
        except OSError as e:
            file_error = e

    for handler in handlers:
        handler.setLevel(numeric_level)
    logging.basicConfig(format="%(message)s", level=numeric_level, handlers=handlers, force=True)

    for name, floor in LIBRARY_LOG_FLOORS.items():
        logging.getLogger(name).setLevel(max(numeric_level, floor))

    if file_error is not None:
        structlog.get_logger().warning(
            "log_file_unavailable", path=str(file_path), error=str(file_error)
        )


def bind_context(**kwargs: Any) -> None:
    """Bind fields to every event logged by the current task.

    Example:
        bind_context(command="branch", interaction_id="9876")
        log.info("command_dispatched")  # carries command and interaction_id
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
