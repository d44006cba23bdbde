"""Shared test fixtures for Sentinel."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any
from unittest.mock import AsyncMock

import pytest

from sentinel_bot.core.interaction import InteractionReply, InteractionRequest
from sentinel_bot.interfaces.github import GitHubAPI
from sentinel_bot.models.github import (
    Commit,
    CommitFile,
    Issue,
    IssueState,
    Release,
    ReleaseAsset,
    Repository,
)
from sentinel_bot.models.reply import ReplyPayload

FIXED_TIME = datetime(2024, 1, 15, 12, 0, 0, tzinfo=UTC)


class RecordingChannel:
    """ReplyChannel that records every primitive it is asked to perform."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str | ReplyPayload | None, bool | None]] = []

    async def send(self, reply: str | ReplyPayload, ephemeral: bool) -> None:
        self.calls.append(("send", reply, ephemeral))

    async def defer(self) -> None:
        self.calls.append(("defer", None, None))

    async def edit_original(self, reply: str | ReplyPayload) -> None:
        self.calls.append(("edit_original", reply, None))

    async def followup(self, reply: str | ReplyPayload, ephemeral: bool) -> None:
        self.calls.append(("followup", reply, ephemeral))

    @property
    def methods(self) -> list[str]:
        return [call[0] for call in self.calls]

    @property
    def last_reply(self) -> str | ReplyPayload | None:
        return self.calls[-1][1]

    @property
    def last_ephemeral(self) -> bool | None:
        return self.calls[-1][2]


RequestFactory = Callable[..., tuple[InteractionRequest, RecordingChannel]]


@pytest.fixture
def channel() -> RecordingChannel:
    return RecordingChannel()


@pytest.fixture
def make_request() -> RequestFactory:
    """Build an InteractionRequest backed by a RecordingChannel."""

    def factory(
        command: str, subcommand: str | None = None, **options: Any
    ) -> tuple[InteractionRequest, RecordingChannel]:
        channel = RecordingChannel()
        request = InteractionRequest(
            command=command,
            subcommand=subcommand,
            options=options,
            user_id="1234",
            user_name="octocat",
            interaction_id="9876",
            reply=InteractionReply(channel),
        )
        return request, channel

    return factory


@pytest.fixture
def github() -> AsyncMock:
    """GitHub API stub with a write credential configured."""
    stub = AsyncMock(spec=GitHubAPI)
    stub.has_write_credentials = True
    return stub


@pytest.fixture
def read_only_github() -> AsyncMock:
    """GitHub API stub without a write credential."""
    stub = AsyncMock(spec=GitHubAPI)
    stub.has_write_credentials = False
    return stub


@pytest.fixture
def hello_world() -> Repository:
    return Repository(
        full_name="octocat/Hello-World",
        default_branch="master",
        html_url="https://github.com/octocat/Hello-World",
        stargazers_count=42,
    )


@pytest.fixture
def make_commit() -> Callable[..., Commit]:
    def factory(
        sha: str = "6dcb09b5b57875f334f61aebed695e2e4193db5e",
        message: str = "Fix all the bugs",
        files: tuple[CommitFile, ...] = (),
        additions: int = 0,
        deletions: int = 0,
    ) -> Commit:
        return Commit(
            sha=sha,
            message=message,
            author_name="Monalisa Octocat",
            author_url="https://github.com/octocat",
            authored_at=FIXED_TIME,
            html_url=f"https://github.com/octocat/Hello-World/commit/{sha}",
            files=files,
            additions=additions,
            deletions=deletions,
        )

    return factory


@pytest.fixture
def make_issue() -> Callable[..., Issue]:
    def factory(
        number: int = 1347,
        title: str = "Found a bug",
        body: str = "I'm having a problem with this.",
        state: IssueState = IssueState.OPEN,
        labels: tuple[str, ...] = (),
        assignees: tuple[str, ...] = (),
        comments: int = 0,
    ) -> Issue:
        return Issue(
            number=number,
            title=title,
            body=body,
            state=state,
            html_url=f"https://github.com/octocat/Hello-World/issues/{number}",
            author="octocat",
            author_url="https://github.com/octocat",
            labels=labels,
            assignees=assignees,
            comments=comments,
            created_at=FIXED_TIME,
            updated_at=FIXED_TIME,
        )

    return factory


@pytest.fixture
def make_release() -> Callable[..., Release]:
    def factory(
        tag_name: str = "v1.0.0",
        name: str | None = "v1.0.0",
        body: str | None = "Description of the release",
        draft: bool = False,
        prerelease: bool = False,
        assets: tuple[ReleaseAsset, ...] = (),
    ) -> Release:
        return Release(
            tag_name=tag_name,
            name=name,
            body=body,
            html_url=f"https://github.com/octocat/Hello-World/releases/{tag_name}",
            draft=draft,
            prerelease=prerelease,
            author="octocat",
            author_url="https://github.com/octocat",
            created_at=FIXED_TIME,
            published_at=FIXED_TIME,
            assets=assets,
        )

    return factory
