"""Concrete implementations of provider interfaces."""

from .discord import DiscordAdapter
from .github import GitHubAPIError, GitHubClient

__all__ = [
    "DiscordAdapter",
    "GitHubAPIError",
    "GitHubClient",
]
