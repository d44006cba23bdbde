"""Data models for GitHub resources.

These are read fresh from the REST API on every call; nothing is cached and
they carry no identity beyond the response they were parsed from.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


@dataclass(frozen=True)
class Repository:
    """A GitHub repository."""

    full_name: str
    default_branch: str
    html_url: str
    stargazers_count: int = 0
    private: bool = False


@dataclass(frozen=True)
class Branch:
    """A branch as returned by the branch listing."""

    name: str
    protected: bool
    sha: str = ""


@dataclass(frozen=True)
class GitRef:
    """A named pointer to a commit (e.g. ``refs/heads/main``)."""

    ref: str
    sha: str


@dataclass(frozen=True)
class CommitFile:
    """A file touched by a commit."""

    filename: str
    status: str  # "added", "removed", "modified", "renamed", ...
    changes: int = 0


@dataclass(frozen=True)
class Commit:
    """A commit with optional diff statistics (single-commit lookups only)."""

    sha: str
    message: str
    author_name: str
    author_url: str | None
    authored_at: datetime
    html_url: str
    files: tuple[CommitFile, ...] = ()
    additions: int = 0
    deletions: int = 0

    @property
    def short_sha(self) -> str:
        return self.sha[:7]

    @property
    def title(self) -> str:
        """First line of the commit message."""
        return self.message.split("\n", 1)[0]

    @property
    def body(self) -> str:
        """Everything after the first line of the commit message."""
        parts = self.message.split("\n", 1)
        return parts[1] if len(parts) > 1 else ""


class IssueState(Enum):
    """State of a GitHub issue."""

    OPEN = "open"
    CLOSED = "closed"


@dataclass(frozen=True)
class Issue:
    """A GitHub issue."""

    number: int
    title: str
    body: str
    state: IssueState
    html_url: str
    author: str
    author_url: str | None
    labels: tuple[str, ...]
    assignees: tuple[str, ...]
    comments: int
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class ReleaseAsset:
    """A downloadable file attached to a release."""

    name: str
    size: int
    download_url: str


@dataclass(frozen=True)
class Release:
    """A GitHub release."""

    tag_name: str
    name: str | None
    body: str | None
    html_url: str
    draft: bool
    prerelease: bool
    author: str
    author_url: str | None
    created_at: datetime
    published_at: datetime | None
    assets: tuple[ReleaseAsset, ...] = ()

    @property
    def display_name(self) -> str:
        return self.name or self.tag_name


@dataclass(frozen=True)
class Gist:
    """A created gist."""

    id: str
    html_url: str


@dataclass(frozen=True)
class Workflow:
    """A GitHub Actions workflow."""

    id: int
    name: str
    path: str
    state: str


@dataclass(frozen=True)
class WorkflowList:
    """Workflows of a repository, with the API's total count."""

    total_count: int
    workflows: tuple[Workflow, ...]
