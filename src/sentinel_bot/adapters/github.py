"""GitHub REST API adapter using httpx.

This module implements the GitHubAPI protocol on top of a single
long-lived httpx.AsyncClient.

- The bearer token is optional; without it only public, read-only
  endpoints are usable and has_write_credentials is False.
- Every error status becomes a GitHubAPIError carrying the status code,
  so handlers can map 404/422 to specific messages.
- There is no retry logic; a failed call surfaces immediately.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any
from urllib.parse import quote

import httpx
import structlog

from ..config.schema import GitHubConfig
from ..models.github import (
    Branch,
    Commit,
    CommitFile,
    Gist,
    GitRef,
    Issue,
    IssueState,
    Release,
    ReleaseAsset,
    Repository,
    Workflow,
    WorkflowList,
)

log = structlog.get_logger()

API_VERSION = "2022-11-28"


class GitHubAPIError(Exception):
    """Raised when the GitHub API answers with an error status.

    Attributes:
        status: HTTP status code (0 when the request never got a response).
    """

    def __init__(self, message: str, status: int = 0) -> None:
        super().__init__(message)
        self.status = status

    @property
    def is_not_found(self) -> bool:
        return self.status == 404

    @property
    def is_unprocessable(self) -> bool:
        return self.status == 422


def _segment(value: str) -> str:
    """Quote a single URL path segment."""
    return quote(value, safe="")


def _ref_path(ref: str) -> str:
    """Quote a ref path such as ``heads/feature/x``, keeping its slashes."""
    return quote(ref, safe="/")


def _parse_timestamp(timestamp_str: str | None) -> datetime | None:
    """Parse an ISO 8601 timestamp from the GitHub API."""
    if not timestamp_str:
        return None

    try:
        if timestamp_str.endswith("Z"):
            timestamp_str = timestamp_str[:-1] + "+00:00"
        return datetime.fromisoformat(timestamp_str)
    except ValueError:
        return None


def _login(user: Any) -> tuple[str, str | None]:
    """Extract (login, html_url) from a user object that may be null."""
    if isinstance(user, dict):
        return user.get("login", "unknown"), user.get("html_url")
    return "unknown", None


class GitHubClient:
    """GitHub REST API client implementing the GitHubAPI protocol.

    Example:
        client = GitHubClient(GitHubConfig(token="ghp_..."))
        repo = await client.get_repository("octocat", "Hello-World")
        print(repo.default_branch)
        await client.close()
    """

    def __init__(
        self,
        config: GitHubConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the GitHub client.

        Args:
            config: GitHub-specific configuration.
            http_client: Pre-built client (tests pass one with a mock transport).
        """
        self._config = config

        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": config.user_agent,
        }
        if config.token:
            headers["Authorization"] = f"Bearer {config.token}"

        if http_client is None:
            http_client = httpx.AsyncClient(
                base_url=config.api_url,
                headers=headers,
                timeout=config.timeout,
            )
        else:
            http_client.headers.update(headers)
        self._http = http_client

    @property
    def has_write_credentials(self) -> bool:
        return self._config.token is not None

    async def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._http.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Send a request and raise GitHubAPIError on any error status.

        Raises:
            GitHubAPIError: On transport failures and 4xx/5xx responses.
        """
        try:
            response = await self._http.request(method, path, params=params, json=json)
        except httpx.HTTPError as e:
            log.error("github_transport_error", method=method, path=path, error=str(e))
            raise GitHubAPIError(f"{method} {path} failed: {e}") from e

        if response.is_error:
            message = ""
            try:
                message = response.json().get("message", "")
            except ValueError:
                message = response.text[:200]
            log.debug(
                "github_error_response",
                method=method,
                path=path,
                status=response.status_code,
                message=message,
            )
            raise GitHubAPIError(
                f"{method} {path} returned {response.status_code}: {message}",
                status=response.status_code,
            )

        return response

    def _repo_path(self, owner: str, repo: str) -> str:
        return f"/repos/{_segment(owner)}/{_segment(repo)}"

    # Parsers

    def _parse_repository(self, data: dict[str, Any]) -> Repository:
        return Repository(
            full_name=data.get("full_name", ""),
            default_branch=data.get("default_branch", "main"),
            html_url=data.get("html_url", ""),
            stargazers_count=data.get("stargazers_count", 0),
            private=data.get("private", False),
        )

    def _parse_commit(self, data: dict[str, Any]) -> Commit:
        commit_data = data.get("commit") or {}
        author_data = commit_data.get("author") or {}
        _, author_url = _login(data.get("author"))
        stats = data.get("stats") or {}

        return Commit(
            sha=data.get("sha", ""),
            message=commit_data.get("message", ""),
            author_name=author_data.get("name", "unknown"),
            author_url=author_url,
            authored_at=_parse_timestamp(author_data.get("date")) or datetime.now(UTC),
            html_url=data.get("html_url", ""),
            files=tuple(
                CommitFile(
                    filename=f.get("filename", ""),
                    status=f.get("status", "modified"),
                    changes=f.get("changes", 0),
                )
                for f in data.get("files") or []
            ),
            additions=stats.get("additions", 0),
            deletions=stats.get("deletions", 0),
        )

    def _parse_issue(self, data: dict[str, Any]) -> Issue:
        state = IssueState.CLOSED if data.get("state") == "closed" else IssueState.OPEN
        author, author_url = _login(data.get("user"))
        labels = tuple(
            label.get("name", "") if isinstance(label, dict) else str(label)
            for label in data.get("labels") or []
        )
        assignees = tuple(_login(user)[0] for user in data.get("assignees") or [])
        now = datetime.now(UTC)

        return Issue(
            number=data.get("number", 0),
            title=data.get("title", ""),
            body=data.get("body") or "",
            state=state,
            html_url=data.get("html_url", ""),
            author=author,
            author_url=author_url,
            labels=labels,
            assignees=assignees,
            comments=data.get("comments", 0),
            created_at=_parse_timestamp(data.get("created_at")) or now,
            updated_at=_parse_timestamp(data.get("updated_at")) or now,
        )

    def _parse_release(self, data: dict[str, Any]) -> Release:
        author, author_url = _login(data.get("author"))
        return Release(
            tag_name=data.get("tag_name", ""),
            name=data.get("name") or None,
            body=data.get("body") or None,
            html_url=data.get("html_url", ""),
            draft=data.get("draft", False),
            prerelease=data.get("prerelease", False),
            author=author,
            author_url=author_url,
            created_at=_parse_timestamp(data.get("created_at")) or datetime.now(UTC),
            published_at=_parse_timestamp(data.get("published_at")),
            assets=tuple(
                ReleaseAsset(
                    name=asset.get("name", ""),
                    size=asset.get("size", 0),
                    download_url=asset.get("browser_download_url", ""),
                )
                for asset in data.get("assets") or []
            ),
        )

    # Repositories and branches

    async def get_repository(self, owner: str, repo: str) -> Repository:
        response = await self._request("GET", self._repo_path(owner, repo))
        return self._parse_repository(response.json())

    async def list_branches(self, owner: str, repo: str, per_page: int = 100) -> list[Branch]:
        response = await self._request(
            "GET",
            f"{self._repo_path(owner, repo)}/branches",
            params={"per_page": per_page},
        )
        return [
            Branch(
                name=b.get("name", ""),
                protected=b.get("protected", False),
                sha=(b.get("commit") or {}).get("sha", ""),
            )
            for b in response.json()
        ]

    async def get_ref(self, owner: str, repo: str, ref: str) -> GitRef:
        response = await self._request(
            "GET", f"{self._repo_path(owner, repo)}/git/ref/{_ref_path(ref)}"
        )
        data = response.json()
        return GitRef(ref=data.get("ref", ""), sha=(data.get("object") or {}).get("sha", ""))

    async def create_ref(self, owner: str, repo: str, ref: str, sha: str) -> GitRef:
        response = await self._request(
            "POST",
            f"{self._repo_path(owner, repo)}/git/refs",
            json={"ref": ref, "sha": sha},
        )
        data = response.json()
        log.info("github_ref_created", repo=f"{owner}/{repo}", ref=ref)
        return GitRef(ref=data.get("ref", ref), sha=(data.get("object") or {}).get("sha", sha))

    async def delete_ref(self, owner: str, repo: str, ref: str) -> None:
        await self._request("DELETE", f"{self._repo_path(owner, repo)}/git/refs/{_ref_path(ref)}")
        log.info("github_ref_deleted", repo=f"{owner}/{repo}", ref=ref)

    # Commits

    async def get_commit(self, owner: str, repo: str, ref: str) -> Commit:
        response = await self._request(
            "GET", f"{self._repo_path(owner, repo)}/commits/{_segment(ref)}"
        )
        return self._parse_commit(response.json())

    async def list_commits(
        self, owner: str, repo: str, sha: str | None = None, per_page: int = 5
    ) -> list[Commit]:
        params: dict[str, Any] = {"per_page": per_page}
        if sha:
            params["sha"] = sha
        response = await self._request(
            "GET", f"{self._repo_path(owner, repo)}/commits", params=params
        )
        return [self._parse_commit(c) for c in response.json()]

    # Issues

    async def get_issue(self, owner: str, repo: str, number: int) -> Issue:
        response = await self._request("GET", f"{self._repo_path(owner, repo)}/issues/{number}")
        return self._parse_issue(response.json())

    async def list_issues(
        self, owner: str, repo: str, state: str = "open", per_page: int = 10
    ) -> list[Issue]:
        response = await self._request(
            "GET",
            f"{self._repo_path(owner, repo)}/issues",
            params={"state": state, "per_page": per_page},
        )
        return [self._parse_issue(i) for i in response.json()]

    # Releases

    async def get_latest_release(self, owner: str, repo: str) -> Release:
        response = await self._request("GET", f"{self._repo_path(owner, repo)}/releases/latest")
        return self._parse_release(response.json())

    async def list_releases(self, owner: str, repo: str, per_page: int = 10) -> list[Release]:
        response = await self._request(
            "GET",
            f"{self._repo_path(owner, repo)}/releases",
            params={"per_page": per_page},
        )
        return [self._parse_release(r) for r in response.json()]

    # Gists

    async def create_gist(
        self, filename: str, content: str, description: str = "", public: bool = False
    ) -> Gist:
        response = await self._request(
            "POST",
            "/gists",
            json={
                "description": description,
                "public": public,
                "files": {filename: {"content": content}},
            },
        )
        data = response.json()
        log.info("github_gist_created", gist_id=data.get("id"), public=public)
        return Gist(id=str(data.get("id", "")), html_url=data.get("html_url", ""))

    # Stars

    async def is_starred(self, owner: str, repo: str) -> bool:
        try:
            response = await self._request(
                "GET", f"/user/starred/{_segment(owner)}/{_segment(repo)}"
            )
        except GitHubAPIError as e:
            # 404 is the API's way of saying "not starred"
            if e.is_not_found:
                return False
            raise
        return response.status_code == 204

    async def star_repository(self, owner: str, repo: str) -> None:
        await self._request("PUT", f"/user/starred/{_segment(owner)}/{_segment(repo)}")
        log.info("github_repository_starred", repo=f"{owner}/{repo}")

    async def unstar_repository(self, owner: str, repo: str) -> None:
        await self._request("DELETE", f"/user/starred/{_segment(owner)}/{_segment(repo)}")
        log.info("github_repository_unstarred", repo=f"{owner}/{repo}")

    # Actions

    async def list_workflows(self, owner: str, repo: str) -> WorkflowList:
        response = await self._request("GET", f"{self._repo_path(owner, repo)}/actions/workflows")
        data = response.json()
        workflows = tuple(
            Workflow(
                id=w.get("id", 0),
                name=w.get("name", ""),
                path=w.get("path", ""),
                state=w.get("state", "unknown"),
            )
            for w in data.get("workflows") or []
        )
        return WorkflowList(total_count=data.get("total_count", len(workflows)), workflows=workflows)

    async def dispatch_workflow(self, owner: str, repo: str, workflow_id: str, ref: str) -> None:
        await self._request(
            "POST",
            f"{self._repo_path(owner, repo)}/actions/workflows/{_segment(workflow_id)}/dispatches",
            json={"ref": ref},
        )
        log.info(
            "github_workflow_dispatched",
            repo=f"{owner}/{repo}",
            workflow=workflow_id,
            ref=ref,
        )

    # Health

    async def get_rate_limit(self) -> dict[str, Any]:
        """Return the ``core`` rate-limit bucket for the current credentials."""
        response = await self._request("GET", "/rate_limit")
        core: dict[str, Any] = response.json().get("resources", {}).get("core", {})
        return core
