"""Secret redaction for log output.

The bot handles two credentials (the Discord bot token and the optional
GitHub token). Neither may ever reach a log line or a chat reply, so every
log event passes through a SecretRedactor before rendering.

Redaction is fail-closed: if a pattern cannot be compiled or applied, an
exception is raised instead of returning unredacted text.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import Sequence

log = structlog.get_logger()


class SecurityError(Exception):
    """Base exception for security-related errors."""


class RedactionError(SecurityError):
    """Raised when secret redaction fails."""


class SecretRedactor:
    """Detects and redacts secrets from text.

    Usage:
        redactor = SecretRedactor()
        safe_text = redactor.redact(potentially_sensitive_text)

    Attributes:
        patterns: List of compiled regex patterns to detect secrets.
        placeholder: The string to replace secrets with (default: "[REDACTED]").
    """

    DEFAULT_PATTERNS: tuple[tuple[str, str], ...] = (
        # Generic patterns
        (
            r"(?i)(api[_-]?key|secret|token|password|credential)\s*[=:]\s*[\"']?[\w-]{16,}",
            "Generic secret",
        ),
        (r"(?i)(authorization\s*[=:]\s*[\"']?)?bearer\s+[\w.-]{16,}", "Bearer credential"),
        # Discord
        (r"[MNO][\w-]{23,27}\.[\w-]{6}\.[\w-]{27,38}", "Discord bot token"),
        (
            r"https://(?:\w+\.)?discord(?:app)?\.com/api/webhooks/\d+/[\w-]+",
            "Discord webhook URL",
        ),
        # GitHub
        (r"ghp_[a-zA-Z0-9]{36}", "GitHub PAT"),
        (r"github_pat_[a-zA-Z0-9_]{22,}", "GitHub fine-grained PAT"),
        (r"gho_[a-zA-Z0-9]{36}", "GitHub OAuth token"),
        (r"ghu_[a-zA-Z0-9]{36}", "GitHub user-to-server token"),
        (r"ghs_[a-zA-Z0-9]{36}", "GitHub server-to-server token"),
        (r"ghr_[a-zA-Z0-9]{36}", "GitHub refresh token"),
        # JWT tokens
        (
            r"eyJ[a-zA-Z0-9_-]*\.eyJ[a-zA-Z0-9_-]*\.[a-zA-Z0-9_-]*",
            "JWT token",
        ),
    )

    def __init__(
        self,
        placeholder: str = "[REDACTED]",
        custom_patterns: Sequence[tuple[str, str]] | None = None,
    ) -> None:
        """Initialize the SecretRedactor.

        Args:
            placeholder: String to replace detected secrets with.
            custom_patterns: Additional (pattern, name) tuples to detect.

        Raises:
            RedactionError: If any pattern fails to compile.
        """
        self.placeholder = placeholder
        self._pattern_names: dict[re.Pattern[str], str] = {}

        all_patterns = list(self.DEFAULT_PATTERNS)
        if custom_patterns:
            all_patterns.extend(custom_patterns)

        try:
            for pattern_str, name in all_patterns:
                compiled = re.compile(pattern_str)
                self._pattern_names[compiled] = name
        except re.error as e:
            msg = f"Failed to compile secret pattern '{pattern_str}': {e}"
            log.error("pattern_compilation_failed", pattern=pattern_str, error=str(e))
            raise RedactionError(msg) from e

    @property
    def patterns(self) -> list[re.Pattern[str]]:
        """Return the list of compiled patterns."""
        return list(self._pattern_names.keys())

    def redact(self, text: str) -> str:
        """Redact all secrets from the given text.

        Args:
            text: The text to scan and redact secrets from.

        Returns:
            The text with all detected secrets replaced with placeholder.

        Raises:
            RedactionError: If redaction fails for any reason.
        """
        if not text:
            return text

        try:
            result = text
            for pattern in self._pattern_names:
                result = pattern.sub(self.placeholder, result)
            return result
        except Exception as e:
            log.error("redaction_failed", error_type=type(e).__name__)
            raise RedactionError(f"Redaction failed: {e}") from e


def mask_secret(value: str | None) -> str:
    """Mask a credential for display, keeping only a short prefix and suffix."""
    if not value:
        return "<unset>"
    if len(value) > 8:
        return f"{value[:4]}...{value[-4:]}"
    return "***"
