"""/commit: show one commit, or the most recent commits on a branch."""

from __future__ import annotations

from ..adapters.github import GitHubAPIError
from ..core.interaction import InteractionRequest
from ..interfaces.github import GitHubAPI
from ..models.commands import CommandDefinition, OptionDefinition, OptionType
from ..models.github import Commit, CommitFile
from ..models.reply import FIELD_VALUE_LIMIT, Color, ReplyPayload
from ..models.repository import RepositoryRef
from ..utils.formatting import clamp_limit, markdown_link, relative_timestamp, truncate
from .base import failure_message, plural, repository_option, require_repository

DEFAULT_LIMIT = 5
MAX_LIMIT = 10
MAX_FILES = 10
TITLE_LENGTH = 50

FILE_STATUS_GLYPHS = {
    "added": "➕",
    "removed": "➖",
}
MODIFIED_GLYPH = "✏️"

DEFINITION = CommandDefinition(
    name="commit",
    description="View commit information",
    options=(
        repository_option(),
        OptionDefinition(name="sha", description="Commit SHA (full or short)"),
        OptionDefinition(name="branch", description="Branch name (default: default branch)"),
        OptionDefinition(
            name="limit",
            description="Number of recent commits to show (default: 5, max: 10)",
            type=OptionType.INTEGER,
        ),
    ),
)


def _file_line(file: CommitFile) -> str:
    glyph = FILE_STATUS_GLYPHS.get(file.status, MODIFIED_GLYPH)
    return f"{glyph} {file.filename} ({file.changes} changes)"


def build_commit_detail(commit: Commit) -> ReplyPayload:
    payload = ReplyPayload(
        title=f"Commit: {commit.title}",
        description=commit.body.strip() or "No additional message",
        color=Color.BLUE,
        url=commit.html_url,
    )
    payload.add_field("SHA", f"`{commit.short_sha}`", inline=True)
    payload.add_field("Author", markdown_link(commit.author_name, commit.author_url), inline=True)
    payload.add_field("Committed", relative_timestamp(commit.authored_at), inline=True)
    payload.add_field("Files Changed", str(len(commit.files)), inline=True)
    payload.add_field("Additions", f"+{commit.additions}", inline=True)
    payload.add_field("Deletions", f"-{commit.deletions}", inline=True)

    if commit.files:
        file_list = "\n".join(_file_line(f) for f in commit.files[:MAX_FILES])
        payload.add_field("Files Changed", truncate(file_list, FIELD_VALUE_LIMIT))

    payload.add_button("View on GitHub", commit.html_url)
    return payload


def build_commit_list(repo: RepositoryRef, branch: str, commits: list[Commit]) -> ReplyPayload:
    commits_url = f"{repo.html_url}/commits/{branch}"
    payload = ReplyPayload(
        title=f"Recent Commits in {repo}",
        description=f"Branch: `{branch}`\nShowing {plural(len(commits), 'commit')}",
        color=Color.BLUE,
        url=commits_url,
    )
    for index, commit in enumerate(commits, start=1):
        payload.add_field(
            f"{index}. {commit.short_sha}: {truncate(commit.title, TITLE_LENGTH)}",
            f"By {commit.author_name} • {relative_timestamp(commit.authored_at)}\n"
            f"[View]({commit.html_url})",
        )
    payload.add_button("View All Commits", commits_url)
    return payload


async def handle(request: InteractionRequest, github: GitHubAPI) -> None:
    repo = await require_repository(request)
    if repo is None:
        return

    sha = request.get_string("sha")
    branch = request.get_string("branch")
    limit = clamp_limit(request.get_integer("limit"), DEFAULT_LIMIT, MAX_LIMIT)

    deferred = await request.reply.defer()

    try:
        if sha:
            commit = await github.get_commit(repo.owner, repo.name, sha)
            await deferred.finalize(build_commit_detail(commit))
            return

        if not branch:
            branch = (await github.get_repository(repo.owner, repo.name)).default_branch
        commits = await github.list_commits(repo.owner, repo.name, sha=branch, per_page=limit)
    except GitHubAPIError as e:
        await deferred.finalize(
            failure_message(
                e,
                not_found=f"Repository {repo} not found or commit doesn't exist.",
                generic="Error fetching commit information. Make sure the repository is public.",
            )
        )
        return

    if not commits:
        await deferred.finalize(f"No commits found in {repo} on branch {branch}.")
        return

    await deferred.finalize(build_commit_list(repo, branch, commits))
