"""Abstract interface for the GitHub REST API client."""

from typing import Protocol

from ..models.github import (
    Branch,
    Commit,
    Gist,
    GitRef,
    Issue,
    Release,
    Repository,
    WorkflowList,
)


class GitHubAPI(Protocol):
    """The remote calls command handlers may make.

    Every method raises GitHubAPIError (carrying the HTTP status) when
    the API answers with an error status.
    """

    @property
    def has_write_credentials(self) -> bool:
        """True when a token is configured, enabling mutating operations."""
        ...

    async def get_repository(self, owner: str, repo: str) -> Repository:
        """Fetch repository metadata (default branch, star count...)."""
        ...

    async def list_branches(self, owner: str, repo: str, per_page: int = 100) -> list[Branch]:
        """List branches, one page of up to ``per_page`` entries."""
        ...

    async def get_ref(self, owner: str, repo: str, ref: str) -> GitRef:
        """Fetch a ref such as ``heads/main``."""
        ...

    async def create_ref(self, owner: str, repo: str, ref: str, sha: str) -> GitRef:
        """Create a fully qualified ref (``refs/heads/name``) at ``sha``."""
        ...

    async def delete_ref(self, owner: str, repo: str, ref: str) -> None:
        """Delete a ref such as ``heads/feature``."""
        ...

    async def get_commit(self, owner: str, repo: str, ref: str) -> Commit:
        """Fetch one commit, including file statistics."""
        ...

    async def list_commits(
        self, owner: str, repo: str, sha: str | None = None, per_page: int = 5
    ) -> list[Commit]:
        """List the most recent commits reachable from ``sha``."""
        ...

    async def get_issue(self, owner: str, repo: str, number: int) -> Issue:
        """Fetch one issue by number."""
        ...

    async def list_issues(
        self, owner: str, repo: str, state: str = "open", per_page: int = 10
    ) -> list[Issue]:
        """List issues filtered by state ("open", "closed" or "all")."""
        ...

    async def get_latest_release(self, owner: str, repo: str) -> Release:
        """Fetch the most recent published, non-draft release."""
        ...

    async def list_releases(self, owner: str, repo: str, per_page: int = 10) -> list[Release]:
        """List releases, newest first."""
        ...

    async def create_gist(
        self, filename: str, content: str, description: str = "", public: bool = False
    ) -> Gist:
        """Create a single-file gist for the authenticated user."""
        ...

    async def is_starred(self, owner: str, repo: str) -> bool:
        """Check whether the authenticated user has starred the repository."""
        ...

    async def star_repository(self, owner: str, repo: str) -> None:
        """Star the repository for the authenticated user."""
        ...

    async def unstar_repository(self, owner: str, repo: str) -> None:
        """Remove the authenticated user's star from the repository."""
        ...

    async def list_workflows(self, owner: str, repo: str) -> WorkflowList:
        """List the repository's Actions workflows."""
        ...

    async def dispatch_workflow(self, owner: str, repo: str, workflow_id: str, ref: str) -> None:
        """Trigger a workflow_dispatch run of ``workflow_id`` on ``ref``."""
        ...
