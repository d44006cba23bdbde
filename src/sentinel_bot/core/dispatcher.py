"""Dispatcher: routes interactions to their command handler.

The dispatcher is the last-resort safety net. Handlers are expected to
answer every interaction themselves; anything that escapes them is
logged and turned into a generic ephemeral failure message.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from ..utils.logging import bind_context, clear_context
from .registry import CommandNotFoundError, CommandRegistry

if TYPE_CHECKING:
    from ..interfaces.github import GitHubAPI
    from .interaction import InteractionRequest

log = structlog.get_logger()

FAILURE_MESSAGE = "There was an error while executing this command!"


class Dispatcher:
    """Resolves handlers from a frozen registry and invokes them."""

    def __init__(self, registry: CommandRegistry, github: GitHubAPI) -> None:
        self._registry = registry
        self._github = github

    async def dispatch(self, request: InteractionRequest) -> None:
        """Run the handler for one interaction. Never raises."""
        clear_context()
        bind_context(
            command=request.command,
            subcommand=request.subcommand,
            user_id=request.user_id,
            interaction_id=request.interaction_id,
        )

        try:
            entry = self._registry.resolve(request.command)
        except CommandNotFoundError:
            # The platform may advertise commands this process does not know
            log.warning("unknown_command", command=request.command)
            return

        log.info("command_dispatched", command=request.command, subcommand=request.subcommand)

        try:
            await entry.handler(request, self._github)
        except Exception as e:
            log.exception("command_failed", command=request.command, error=str(e))
            await self._report_failure(request)
        else:
            log.debug("command_completed", command=request.command)
        finally:
            clear_context()

    async def _report_failure(self, request: InteractionRequest) -> None:
        try:
            await request.reply.fail(FAILURE_MESSAGE)
        except Exception as e:
            # Typically the interaction token has already expired
            log.error(
                "failure_reply_failed",
                command=request.command,
                reply_state=request.reply.state.value,
                error=str(e),
            )
