"""Steps shared by every command handler.

Handlers follow the same order:

1. Validate the repository option (ephemeral reply, before defer).
2. Check write credentials for mutating operations (ephemeral reply,
   before any API call).
3. Defer, call the GitHub API, finalize with the result.

The helpers below implement steps 1 and 2 and the mapping of API
failures to user-facing messages.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping

import structlog

from ..adapters.github import GitHubAPIError
from ..core.interaction import InteractionRequest
from ..interfaces.github import GitHubAPI
from ..models.commands import OptionDefinition
from ..models.repository import InvalidRepositoryError, RepositoryRef

log = structlog.get_logger()

INVALID_REPOSITORY_MESSAGE = "Please provide a valid repository name in the format `owner/repo`"
PERMISSIONS_MESSAGE = (
    "Error processing your request. Make sure your GitHub token has the necessary permissions."
)

SubcommandHandler = Callable[[InteractionRequest, GitHubAPI], Awaitable[None]]


def repository_option(name: str = "repo") -> OptionDefinition:
    """The required ``owner/repo`` option most commands take."""
    return OptionDefinition(
        name=name,
        description="Repository name (owner/repo)",
        required=True,
    )


def repository_not_found(repo: RepositoryRef) -> str:
    return f"Repository {repo} not found. Make sure you have the correct name."


def write_required_message(action: str) -> str:
    return f"❌ This command requires a GitHub token. {action} requires authentication."


async def require_repository(
    request: InteractionRequest, option: str = "repo"
) -> RepositoryRef | None:
    """Parse the repository option, answering ephemerally when it is malformed.

    Returns:
        The parsed reference, or None once the invoker has been told
        the value is invalid
    """
    try:
        return RepositoryRef.parse(request.get_string(option))
    except InvalidRepositoryError as e:
        log.info("invalid_repository_reference", option=option, error=str(e))
        await request.reply.send_ephemeral(INVALID_REPOSITORY_MESSAGE)
        return None


async def require_write_access(
    request: InteractionRequest, github: GitHubAPI, action: str
) -> bool:
    """Answer ephemerally and return False when no write credential is configured."""
    if github.has_write_credentials:
        return True

    log.info("write_credentials_missing", command=request.command, subcommand=request.subcommand)
    await request.reply.send_ephemeral(write_required_message(action))
    return False


def failure_message(
    error: GitHubAPIError,
    *,
    not_found: str,
    generic: str,
    conflict: str | None = None,
) -> str:
    """Log an API failure and pick the message shown to the invoker.

    Args:
        error: The failure raised by the GitHub client
        not_found: Shown for a 404
        generic: Shown for every other status
        conflict: Shown for a 422, when the operation defines one
    """
    if error.is_not_found:
        log.info("github_resource_not_found", status=error.status, error=str(error))
        return not_found

    if conflict is not None and error.is_unprocessable:
        log.info("github_request_conflict", status=error.status, error=str(error))
        return conflict

    log.error("github_request_failed", status=error.status, error=str(error))
    return generic


def plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'' if count == 1 else 's'}"


async def run_subcommand(
    request: InteractionRequest,
    github: GitHubAPI,
    handlers: Mapping[str, SubcommandHandler],
) -> None:
    """Invoke the handler registered for the request's subcommand."""
    handler = handlers.get(request.subcommand or "")
    if handler is None:
        log.warning("unknown_subcommand", command=request.command, subcommand=request.subcommand)
        await request.reply.send_ephemeral(f"Unknown subcommand: {request.subcommand}")
        return
    await handler(request, github)
