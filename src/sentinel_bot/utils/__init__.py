"""Utility functions and helpers.

- security: Secret redaction
- logging: Structured logging with secret sanitization
- formatting: Text helpers for replies
- health: Health endpoint and health checks
"""

from .formatting import clamp_limit, format_bytes, truncate
from .health import HealthChecker, HealthReport, HealthServer, HealthStatus
from .logging import bind_context, clear_context, configure_logging
from .security import RedactionError, SecretRedactor, SecurityError

__all__ = [
    # Formatting
    "clamp_limit",
    "format_bytes",
    "truncate",
    # Health
    "HealthChecker",
    "HealthReport",
    "HealthServer",
    "HealthStatus",
    # Logging
    "bind_context",
    "clear_context",
    "configure_logging",
    # Security
    "RedactionError",
    "SecretRedactor",
    "SecurityError",
]
