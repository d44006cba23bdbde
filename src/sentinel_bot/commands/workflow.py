"""/workflow: list and trigger GitHub Actions workflows."""

from __future__ import annotations

from ..adapters.github import GitHubAPIError
from ..core.interaction import InteractionRequest
from ..interfaces.github import GitHubAPI
from ..models.commands import CommandDefinition, OptionDefinition, SubcommandDefinition
from ..models.github import WorkflowList
from ..models.reply import Color, ReplyPayload
from ..models.repository import RepositoryRef
from .base import (
    failure_message,
    repository_option,
    require_repository,
    require_write_access,
    run_subcommand,
)

# Runs are always dispatched on this ref; it is not user-selectable.
# TODO: decide with maintainers whether to use the repository default branch instead.
WORKFLOW_REF = "main"

NO_WORKFLOWS_MESSAGE = "No workflows found in this repository."

DEFINITION = CommandDefinition(
    name="workflow",
    description="Manage GitHub Actions workflows",
    subcommands=(
        SubcommandDefinition(
            name="list",
            description="List available workflows",
            options=(repository_option(),),
        ),
        SubcommandDefinition(
            name="run",
            description="Run a specific workflow",
            options=(
                repository_option(),
                OptionDefinition(
                    name="workflow", description="Workflow file name or ID", required=True
                ),
            ),
        ),
    ),
)


def build_workflow_list(repo: RepositoryRef, listing: WorkflowList) -> ReplyPayload:
    payload = ReplyPayload(
        title=f"Available Workflows in {repo}",
        color=Color.GREEN,
        url=f"{repo.html_url}/actions",
    )
    for workflow in listing.workflows:
        payload.add_field(
            workflow.name,
            f"ID: {workflow.id}\nPath: {workflow.path}\nState: {workflow.state}",
        )
    return payload


async def list_workflows(request: InteractionRequest, github: GitHubAPI) -> None:
    repo = await require_repository(request)
    if repo is None:
        return

    deferred = await request.reply.defer()

    try:
        listing = await github.list_workflows(repo.owner, repo.name)
    except GitHubAPIError as e:
        await deferred.finalize(
            failure_message(
                e,
                not_found=f"Repository {repo} not found.",
                generic="Error fetching workflows.",
            )
        )
        return

    if listing.total_count == 0 or not listing.workflows:
        await deferred.finalize(NO_WORKFLOWS_MESSAGE)
        return

    await deferred.finalize(build_workflow_list(repo, listing))


async def run_workflow(request: InteractionRequest, github: GitHubAPI) -> None:
    repo = await require_repository(request)
    if repo is None:
        return
    if not await require_write_access(request, github, "Triggering workflows"):
        return

    workflow = request.get_string("workflow") or ""
    deferred = await request.reply.defer()

    try:
        await github.dispatch_workflow(repo.owner, repo.name, workflow, WORKFLOW_REF)
    except GitHubAPIError as e:
        await deferred.finalize(
            failure_message(
                e,
                not_found=f"Workflow `{workflow}` not found in repository {repo}.",
                generic="Error triggering workflow.",
            )
        )
        return

    payload = ReplyPayload(
        title="Workflow Triggered",
        description=f"Successfully triggered workflow: {workflow}",
        color=Color.GREEN,
    )
    payload.add_field("Repository", repo.full_name, inline=True)
    payload.add_field("Ref", f"`{WORKFLOW_REF}`", inline=True)
    payload.add_field("Status", "Queued", inline=True)
    payload.add_button("View Workflow", f"{repo.html_url}/actions")
    await deferred.finalize(payload)


SUBCOMMANDS = {
    "list": list_workflows,
    "run": run_workflow,
}


async def handle(request: InteractionRequest, github: GitHubAPI) -> None:
    await run_subcommand(request, github, SUBCOMMANDS)
