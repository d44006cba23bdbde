"""Protocol definitions for pluggable adapters."""

from .chat import ChatProvider, ReplyChannel
from .github import GitHubAPI

__all__ = ["ChatProvider", "GitHubAPI", "ReplyChannel"]
