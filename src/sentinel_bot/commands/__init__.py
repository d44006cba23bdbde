"""Built-in slash commands.

Each module exposes a ``DEFINITION`` and an async ``handle(request, github)``.
"""

from ..core.registry import CommandHandler
from ..models.commands import CommandDefinition
from . import branch, commit, gist, issue, release, star, workflow


def all_commands() -> list[tuple[CommandDefinition, CommandHandler]]:
    """Every built-in command, in the order it is advertised."""
    return [
        (branch.DEFINITION, branch.handle),
        (commit.DEFINITION, commit.handle),
        (gist.DEFINITION, gist.handle),
        (issue.DEFINITION, issue.handle),
        (release.DEFINITION, release.handle),
        (star.DEFINITION, star.handle),
        (workflow.DEFINITION, workflow.handle),
    ]


__all__ = ["all_commands"]
