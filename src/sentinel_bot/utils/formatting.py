"""Text helpers shared by the command handlers."""

from __future__ import annotations

from datetime import datetime

ELLIPSIS = "..."

BYTE_UNITS = ("Bytes", "KB", "MB", "GB")

# Code-fence language tags keyed by lower-case file extension
LANGUAGE_BY_EXTENSION = {
    "js": "javascript",
    "ts": "typescript",
    "py": "python",
    "java": "java",
    "rb": "ruby",
    "php": "php",
    "c": "c",
    "cpp": "cpp",
    "cs": "csharp",
    "go": "go",
    "html": "html",
    "css": "css",
    "json": "json",
    "md": "markdown",
    "sh": "bash",
    "yaml": "yaml",
    "yml": "yaml",
    "xml": "xml",
    "sql": "sql",
    "rs": "rust",
}


def truncate(text: str, limit: int) -> str:
    """Cut ``text`` to at most ``limit`` characters, ending with an ellipsis when cut.

    Example:
        >>> truncate("abcdefgh", 6)
        'abc...'
    """
    if len(text) <= limit:
        return text
    return text[: limit - len(ELLIPSIS)] + ELLIPSIS


def format_bytes(size: int) -> str:
    """Human-readable size, base 1024, rounded to two decimals.

    Example:
        >>> format_bytes(1536)
        '1.5 KB'
    """
    if size <= 0:
        return "0 Bytes"

    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(BYTE_UNITS) - 1:
        value /= 1024
        unit += 1

    number = f"{round(value, 2):.2f}".rstrip("0").rstrip(".")
    return f"{number} {BYTE_UNITS[unit]}"


def clamp_limit(requested: int | None, default: int, maximum: int) -> int:
    """Apply a default and an upper bound to a user-supplied result count."""
    if requested is None or requested < 1:
        return default
    return min(requested, maximum)


def relative_timestamp(moment: datetime) -> str:
    """Chat markup rendering ``moment`` relative to the reader's clock."""
    return f"<t:{int(moment.timestamp())}:R>"


def language_for_filename(filename: str) -> str:
    """Code-fence language for a filename, or "" when the extension is unknown.

    A name without a dot is looked up whole, so ``"sh"`` maps to ``bash``.
    """
    extension = filename.rsplit(".", 1)[-1].lower()
    return LANGUAGE_BY_EXTENSION.get(extension, "")


def markdown_link(label: str, url: str | None) -> str:
    if not url:
        return label
    return f"[{label}]({url})"
