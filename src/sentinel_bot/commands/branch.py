"""/branch: list, create and delete repository branches."""

from __future__ import annotations

from datetime import UTC, datetime

import structlog

from ..adapters.github import GitHubAPIError
from ..core.interaction import InteractionRequest
from ..interfaces.github import GitHubAPI
from ..models.commands import (
    CommandDefinition,
    OptionDefinition,
    OptionType,
    SubcommandDefinition,
)
from ..models.github import Branch
from ..models.reply import BLANK_FIELD_NAME, Color, ReplyPayload
from ..models.repository import RepositoryRef
from .base import (
    PERMISSIONS_MESSAGE,
    failure_message,
    repository_not_found,
    repository_option,
    require_repository,
    require_write_access,
    run_subcommand,
)

log = structlog.get_logger()

BRANCHES_PER_FIELD = 10
LOCK = "🔒"

DEFINITION = CommandDefinition(
    name="branch",
    description="Manage GitHub repository branches",
    subcommands=(
        SubcommandDefinition(
            name="list",
            description="List branches in a repository",
            options=(
                repository_option("repository"),
                OptionDefinition(
                    name="protected",
                    description="Show only protected branches",
                    type=OptionType.BOOLEAN,
                ),
            ),
        ),
        SubcommandDefinition(
            name="create",
            description="Create a new branch in a repository",
            options=(
                repository_option("repository"),
                OptionDefinition(
                    name="name", description="Name for the new branch", required=True
                ),
                OptionDefinition(
                    name="from",
                    description="Base branch to create from (default: repository default branch)",
                ),
            ),
        ),
        SubcommandDefinition(
            name="delete",
            description="Delete a branch from a repository",
            options=(
                repository_option("repository"),
                OptionDefinition(
                    name="name", description="Name of the branch to delete", required=True
                ),
            ),
        ),
    ),
)


def _tree_url(repo: RepositoryRef, branch: str) -> str:
    return f"{repo.html_url}/tree/{branch}"


def _branch_label(branch: Branch) -> str:
    return f"{branch.name} {LOCK}" if branch.protected else branch.name


def build_branch_list(
    repo: RepositoryRef,
    default_branch: str,
    branches: list[Branch],
    protected_only: bool,
) -> str | ReplyPayload:
    """Render the branch listing: default branch first, the rest in chunks."""
    if not branches:
        return f"No branches found in repository {repo}."

    shown = [b for b in branches if b.protected] if protected_only else branches
    if not shown:
        return f"No protected branches found in repository {repo}."

    description = f"Total branches: {len(branches)}"
    if protected_only:
        description += f" (showing {len(shown)} protected)"

    payload = ReplyPayload(
        title=f"Branches in {repo}",
        description=description,
        color=Color.BLUE,
        url=f"{repo.html_url}/branches",
        timestamp=datetime.now(UTC),
    )

    default = next((b for b in shown if b.name == default_branch), None)
    if default is not None:
        payload.add_field(
            f"Default: {_branch_label(default)}",
            f"[View]({_tree_url(repo, default.name)})",
        )

    others = [b for b in shown if b.name != default_branch]
    for start in range(0, len(others), BRANCHES_PER_FIELD):
        chunk = others[start : start + BRANCHES_PER_FIELD]
        payload.add_field(
            "Other Branches" if start == 0 else BLANK_FIELD_NAME,
            "\n".join(
                f"{_branch_label(b)} - [View]({_tree_url(repo, b.name)})" for b in chunk
            ),
        )

    payload.add_button("View All Branches on GitHub", f"{repo.html_url}/branches")
    return payload


async def list_branches(request: InteractionRequest, github: GitHubAPI) -> None:
    repo = await require_repository(request, "repository")
    if repo is None:
        return

    protected_only = request.get_boolean("protected")
    deferred = await request.reply.defer()

    try:
        repository = await github.get_repository(repo.owner, repo.name)
        branches = await github.list_branches(repo.owner, repo.name, per_page=100)
    except GitHubAPIError as e:
        await deferred.finalize(
            failure_message(e, not_found=repository_not_found(repo), generic=PERMISSIONS_MESSAGE)
        )
        return

    await deferred.finalize(
        build_branch_list(repo, repository.default_branch, branches, protected_only)
    )


async def create_branch(request: InteractionRequest, github: GitHubAPI) -> None:
    repo = await require_repository(request, "repository")
    if repo is None:
        return
    if not await require_write_access(request, github, "Creating branches"):
        return

    name = request.get_string("name") or ""
    base = request.get_string("from")
    deferred = await request.reply.defer()

    try:
        repository = await github.get_repository(repo.owner, repo.name)
    except GitHubAPIError as e:
        await deferred.finalize(
            failure_message(e, not_found=repository_not_found(repo), generic=PERMISSIONS_MESSAGE)
        )
        return

    base = base or repository.default_branch

    try:
        base_ref = await github.get_ref(repo.owner, repo.name, f"heads/{base}")
    except GitHubAPIError as e:
        await deferred.finalize(
            failure_message(
                e,
                not_found=f"Base branch `{base}` not found in repository {repo}.",
                generic=PERMISSIONS_MESSAGE,
            )
        )
        return

    try:
        await github.create_ref(repo.owner, repo.name, f"refs/heads/{name}", base_ref.sha)
    except GitHubAPIError as e:
        await deferred.finalize(
            failure_message(
                e,
                not_found=repository_not_found(repo),
                conflict=f"Branch `{name}` already exists in repository {repo}.",
                generic="Error creating branch. Make sure your GitHub token has the "
                "necessary permissions.",
            )
        )
        return

    payload = ReplyPayload(
        title="Branch Created",
        description=f"Successfully created branch `{name}` from `{base}`",
        color=Color.GREEN,
        url=_tree_url(repo, name),
        timestamp=datetime.now(UTC),
    )
    payload.add_field("Repository", repo.full_name, inline=True)
    payload.add_field("Branch", name, inline=True)
    payload.add_field("Base", base, inline=True)
    await deferred.finalize(payload)


async def delete_branch(request: InteractionRequest, github: GitHubAPI) -> None:
    repo = await require_repository(request, "repository")
    if repo is None:
        return
    if not await require_write_access(request, github, "Deleting branches"):
        return

    name = request.get_string("name") or ""
    deferred = await request.reply.defer()

    try:
        repository = await github.get_repository(repo.owner, repo.name)
    except GitHubAPIError as e:
        await deferred.finalize(
            failure_message(e, not_found=repository_not_found(repo), generic=PERMISSIONS_MESSAGE)
        )
        return

    # Checked before the ref lookup so the default branch is never touched
    if name == repository.default_branch:
        log.info("default_branch_delete_refused", repo=repo.full_name, branch=name)
        await deferred.finalize(
            f"Cannot delete the default branch `{name}`. Please change the default branch first."
        )
        return

    try:
        await github.get_ref(repo.owner, repo.name, f"heads/{name}")
        await github.delete_ref(repo.owner, repo.name, f"heads/{name}")
    except GitHubAPIError as e:
        await deferred.finalize(
            failure_message(
                e,
                not_found=f"Branch `{name}` not found in repository {repo}.",
                generic="Error deleting branch. Make sure your GitHub token has the "
                "necessary permissions.",
            )
        )
        return

    payload = ReplyPayload(
        title="Branch Deleted",
        description=f"Successfully deleted branch `{name}`",
        color=Color.RED,
        url=f"{repo.html_url}/branches",
        timestamp=datetime.now(UTC),
    )
    payload.add_field("Repository", repo.full_name, inline=True)
    await deferred.finalize(payload)


SUBCOMMANDS = {
    "list": list_branches,
    "create": create_branch,
    "delete": delete_branch,
}


async def handle(request: InteractionRequest, github: GitHubAPI) -> None:
    await run_subcommand(request, github, SUBCOMMANDS)
