"""/issue: view one issue or list a repository's issues."""

from __future__ import annotations

from ..adapters.github import GitHubAPIError
from ..core.interaction import InteractionRequest
from ..interfaces.github import GitHubAPI
from ..models.commands import (
    CommandDefinition,
    OptionChoice,
    OptionDefinition,
    OptionType,
    SubcommandDefinition,
)
from ..models.github import Issue, IssueState
from ..models.reply import Color, ReplyPayload
from ..models.repository import RepositoryRef
from ..utils.formatting import clamp_limit, markdown_link, relative_timestamp, truncate
from .base import (
    failure_message,
    plural,
    repository_option,
    require_repository,
    run_subcommand,
)

BODY_LENGTH = 500
DEFAULT_LIMIT = 10
MAX_LIMIT = 25
MAX_LABELS = 3

STATE_LABELS = {
    IssueState.OPEN: "🟢 Open",
    IssueState.CLOSED: "🔴 Closed",
}
STATE_GLYPHS = {
    IssueState.OPEN: "🟢",
    IssueState.CLOSED: "🔴",
}
LIST_COLORS = {
    "open": Color.GREEN,
    "closed": Color.RED,
    "all": Color.BLUE,
}

DEFINITION = CommandDefinition(
    name="issue",
    description="View and manage GitHub issues",
    subcommands=(
        SubcommandDefinition(
            name="view",
            description="View a specific issue",
            options=(
                repository_option(),
                OptionDefinition(
                    name="number",
                    description="Issue number",
                    type=OptionType.INTEGER,
                    required=True,
                ),
            ),
        ),
        SubcommandDefinition(
            name="list",
            description="List issues in a repository",
            options=(
                repository_option(),
                OptionDefinition(
                    name="state",
                    description="Issue state",
                    choices=(
                        OptionChoice(name="Open", value="open"),
                        OptionChoice(name="Closed", value="closed"),
                        OptionChoice(name="All", value="all"),
                    ),
                ),
                OptionDefinition(
                    name="limit",
                    description="Maximum number of issues to show (default: 10)",
                    type=OptionType.INTEGER,
                ),
            ),
        ),
    ),
)


def _failure(error: GitHubAPIError, repo: RepositoryRef) -> str:
    return failure_message(
        error,
        not_found=f"Repository {repo} not found or issue doesn't exist.",
        generic="Error fetching issue information. Make sure the repository is public.",
    )


def build_issue_detail(issue: Issue) -> ReplyPayload:
    payload = ReplyPayload(
        title=f"Issue #{issue.number}: {issue.title}",
        description=truncate(issue.body, BODY_LENGTH) if issue.body else "No description",
        color=Color.GREEN if issue.state is IssueState.OPEN else Color.RED,
        url=issue.html_url,
    )
    payload.add_field("State", STATE_LABELS[issue.state], inline=True)
    payload.add_field("Author", markdown_link(issue.author, issue.author_url), inline=True)
    payload.add_field("Created", relative_timestamp(issue.created_at), inline=True)
    payload.add_field("Updated", relative_timestamp(issue.updated_at), inline=True)

    if issue.labels:
        payload.add_field("Labels", ", ".join(issue.labels))
    if issue.assignees:
        payload.add_field("Assignees", ", ".join(issue.assignees), inline=True)
    if issue.comments > 0:
        payload.add_field("Comments", str(issue.comments), inline=True)

    payload.add_button("View on GitHub", issue.html_url)
    return payload


def build_issue_list(repo: RepositoryRef, state: str, issues: list[Issue]) -> ReplyPayload:
    heading = "All" if state == "all" else state.capitalize()
    payload = ReplyPayload(
        title=f"{heading} Issues in {repo}",
        description=f"Showing {plural(len(issues), 'issue')}",
        color=LIST_COLORS.get(state, Color.BLUE),
        url=f"{repo.html_url}/issues",
    )
    for issue in issues:
        value = f"{STATE_GLYPHS[issue.state]} [View]({issue.html_url})"
        if issue.labels:
            value += f" | Labels: {', '.join(issue.labels[:MAX_LABELS])}"
        payload.add_field(f"#{issue.number}: {issue.title}", value)

    payload.add_button("View All Issues", f"{repo.html_url}/issues")
    return payload


async def view_issue(request: InteractionRequest, github: GitHubAPI) -> None:
    repo = await require_repository(request)
    if repo is None:
        return

    number = request.get_integer("number")
    if number is None or number < 1:
        await request.reply.send_ephemeral("Please provide a valid issue number.")
        return

    deferred = await request.reply.defer()

    try:
        issue = await github.get_issue(repo.owner, repo.name, number)
    except GitHubAPIError as e:
        await deferred.finalize(_failure(e, repo))
        return

    await deferred.finalize(build_issue_detail(issue))


async def list_issues(request: InteractionRequest, github: GitHubAPI) -> None:
    repo = await require_repository(request)
    if repo is None:
        return

    state = request.get_string("state") or "open"
    if state not in LIST_COLORS:
        state = "open"
    limit = clamp_limit(request.get_integer("limit"), DEFAULT_LIMIT, MAX_LIMIT)

    deferred = await request.reply.defer()

    try:
        issues = await github.list_issues(repo.owner, repo.name, state=state, per_page=limit)
    except GitHubAPIError as e:
        await deferred.finalize(_failure(e, repo))
        return

    if not issues:
        await deferred.finalize(f"No {state} issues found in {repo}.")
        return

    await deferred.finalize(build_issue_list(repo, state, issues))


SUBCOMMANDS = {
    "view": view_issue,
    "list": list_issues,
}


async def handle(request: InteractionRequest, github: GitHubAPI) -> None:
    await run_subcommand(request, github, SUBCOMMANDS)
