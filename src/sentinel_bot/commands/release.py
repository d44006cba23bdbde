"""/release: latest release and release listings."""

from __future__ import annotations

from ..adapters.github import GitHubAPIError
from ..core.interaction import InteractionRequest
from ..interfaces.github import GitHubAPI
from ..models.commands import (
    CommandDefinition,
    OptionDefinition,
    OptionType,
    SubcommandDefinition,
)
from ..models.github import Release
from ..models.reply import Color, ReplyPayload
from ..models.repository import RepositoryRef
from ..utils.formatting import (
    ELLIPSIS,
    clamp_limit,
    format_bytes,
    markdown_link,
    relative_timestamp,
    truncate,
)
from .base import (
    failure_message,
    plural,
    repository_option,
    require_repository,
    run_subcommand,
)

NOTES_LENGTH = 1000
SUMMARY_LENGTH = 100
MAX_ASSETS = 5
DEFAULT_LIMIT = 10
MAX_LIMIT = 25

PRERELEASE_GLYPH = "⚠️"
DRAFT_GLYPH = "📝"

DEFINITION = CommandDefinition(
    name="release",
    description="View GitHub releases",
    subcommands=(
        SubcommandDefinition(
            name="latest",
            description="Get the latest release",
            options=(repository_option(),),
        ),
        SubcommandDefinition(
            name="list",
            description="List all releases",
            options=(
                repository_option(),
                OptionDefinition(
                    name="limit",
                    description="Maximum number of releases to show (default: 10)",
                    type=OptionType.INTEGER,
                ),
            ),
        ),
    ),
)


def _failure(error: GitHubAPIError, repo: RepositoryRef) -> str:
    return failure_message(
        error,
        not_found=f"Repository {repo} not found or has no releases.",
        generic="Error fetching release information. Make sure the repository is public.",
    )


def release_summary(release: Release) -> str:
    """First 100 characters of the notes, with a marker when cut."""
    if not release.body:
        return "No release notes"
    summary = release.body[:SUMMARY_LENGTH]
    if len(release.body) > SUMMARY_LENGTH:
        summary += ELLIPSIS
    return summary


def build_latest_release(release: Release) -> ReplyPayload:
    published = release.published_at or release.created_at
    payload = ReplyPayload(
        title=f"Latest Release: {release.display_name}",
        description=truncate(release.body, NOTES_LENGTH) if release.body else "No release notes",
        color=Color.GREEN,
        url=release.html_url,
    )
    payload.add_field("Tag", release.tag_name, inline=True)
    payload.add_field("Published", relative_timestamp(published), inline=True)
    payload.add_field("Author", markdown_link(release.author, release.author_url), inline=True)

    if release.prerelease:
        payload.add_field(f"{PRERELEASE_GLYPH} Prerelease", "This is a prerelease", inline=True)
    if release.draft:
        payload.add_field(f"{DRAFT_GLYPH} Draft", "This is a draft release", inline=True)

    if release.assets:
        payload.add_field(
            "Assets",
            "\n".join(
                f"[{asset.name}]({asset.download_url}) ({format_bytes(asset.size)})"
                for asset in release.assets[:MAX_ASSETS]
            ),
        )

    payload.add_button("View Release", release.html_url)
    download_url = release.assets[0].download_url if release.assets else release.html_url
    payload.add_button("Download Latest", download_url)
    return payload


def build_release_list(repo: RepositoryRef, releases: list[Release]) -> ReplyPayload:
    releases_url = f"{repo.html_url}/releases"
    payload = ReplyPayload(
        title=f"Releases for {repo}",
        description=f"Showing {plural(len(releases), 'release')}",
        color=Color.BLUE,
        url=releases_url,
    )
    for index, release in enumerate(releases, start=1):
        flags = ""
        if release.prerelease:
            flags += f" {PRERELEASE_GLYPH}"
        if release.draft:
            flags += f" {DRAFT_GLYPH}"
        when = release.published_at or release.created_at
        payload.add_field(
            f"{index}. {release.display_name}{flags}",
            f"{release_summary(release)}\n"
            f"[View Release]({release.html_url}) | {relative_timestamp(when)}",
        )

    payload.add_button("View All Releases", releases_url)
    return payload


async def latest_release(request: InteractionRequest, github: GitHubAPI) -> None:
    repo = await require_repository(request)
    if repo is None:
        return

    deferred = await request.reply.defer()

    try:
        release = await github.get_latest_release(repo.owner, repo.name)
    except GitHubAPIError as e:
        await deferred.finalize(_failure(e, repo))
        return

    await deferred.finalize(build_latest_release(release))


async def list_releases(request: InteractionRequest, github: GitHubAPI) -> None:
    repo = await require_repository(request)
    if repo is None:
        return

    limit = clamp_limit(request.get_integer("limit"), DEFAULT_LIMIT, MAX_LIMIT)
    deferred = await request.reply.defer()

    try:
        releases = await github.list_releases(repo.owner, repo.name, per_page=limit)
    except GitHubAPIError as e:
        await deferred.finalize(_failure(e, repo))
        return

    if not releases:
        await deferred.finalize(f"No releases found for {repo}.")
        return

    await deferred.finalize(build_release_list(repo, releases))


SUBCOMMANDS = {
    "latest": latest_release,
    "list": list_releases,
}


async def handle(request: InteractionRequest, github: GitHubAPI) -> None:
    await run_subcommand(request, github, SUBCOMMANDS)
