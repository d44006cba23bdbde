"""/star: star or unstar a repository for the authenticated user."""

from __future__ import annotations

from datetime import UTC, datetime

import structlog

from ..adapters.github import GitHubAPIError
from ..core.interaction import InteractionRequest
from ..interfaces.github import GitHubAPI
from ..models.commands import CommandDefinition, OptionDefinition, OptionType
from ..models.reply import Color, ReplyPayload
from .base import (
    PERMISSIONS_MESSAGE,
    failure_message,
    repository_not_found,
    repository_option,
    require_repository,
    require_write_access,
)

log = structlog.get_logger()

DEFINITION = CommandDefinition(
    name="star",
    description="Star or unstar a GitHub repository",
    options=(
        repository_option("repository"),
        OptionDefinition(
            name="unstar",
            description="Unstar the repository instead of starring it",
            type=OptionType.BOOLEAN,
        ),
    ),
)


async def handle(request: InteractionRequest, github: GitHubAPI) -> None:
    repo = await require_repository(request, "repository")
    if repo is None:
        return
    if not await require_write_access(request, github, "Starring repositories"):
        return

    unstar = request.get_boolean("unstar")
    deferred = await request.reply.defer()

    try:
        await github.get_repository(repo.owner, repo.name)
    except GitHubAPIError as e:
        await deferred.finalize(
            failure_message(e, not_found=repository_not_found(repo), generic=PERMISSIONS_MESSAGE)
        )
        return

    try:
        starred = await github.is_starred(repo.owner, repo.name)

        if unstar:
            if not starred:
                await deferred.finalize(
                    f"Repository {repo} is not starred, so it cannot be unstarred."
                )
                return
            await github.unstar_repository(repo.owner, repo.name)
            await deferred.finalize(
                ReplyPayload(
                    title="Repository Unstarred",
                    description=f"Successfully removed star from [{repo}]({repo.html_url})",
                    color=Color.RED,
                    timestamp=datetime.now(UTC),
                )
            )
            return

        if starred:
            await deferred.finalize(f"Repository {repo} is already starred.")
            return
        await github.star_repository(repo.owner, repo.name)
        updated = await github.get_repository(repo.owner, repo.name)
    except GitHubAPIError as e:
        await deferred.finalize(
            failure_message(e, not_found=repository_not_found(repo), generic=PERMISSIONS_MESSAGE)
        )
        return

    log.info("repository_starred", repo=repo.full_name, stars=updated.stargazers_count)
    payload = ReplyPayload(
        title="Repository Starred",
        description=f"Successfully starred [{repo}]({repo.html_url})",
        color=Color.GOLD,
        timestamp=datetime.now(UTC),
    )
    payload.add_field("Total Stars", str(updated.stargazers_count), inline=True)
    await deferred.finalize(payload)
