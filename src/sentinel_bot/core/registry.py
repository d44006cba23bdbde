"""Command registry: maps command names to their definition and handler.

The registry is built once at startup and frozen before it is handed
to the Dispatcher; after that it is read-only.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from ..models.commands import CommandDefinition

if TYPE_CHECKING:
    from ..interfaces.github import GitHubAPI
    from .interaction import InteractionRequest

log = structlog.get_logger()

CommandHandler = Callable[["InteractionRequest", "GitHubAPI"], Awaitable[None]]


class RegistryError(Exception):
    """Base exception for registry errors."""


class DuplicateCommandError(RegistryError):
    """Raised when a command name is registered twice."""


class CommandNotFoundError(RegistryError, KeyError):
    """Raised when resolving a name that was never registered."""


class RegistryFrozenError(RegistryError):
    """Raised when registering into a frozen registry."""


@dataclass(frozen=True)
class CommandEntry:
    """A registered command."""

    definition: CommandDefinition
    handler: CommandHandler

    @property
    def name(self) -> str:
        return self.definition.name


class CommandRegistry:
    """Name -> CommandEntry mapping with an init-once lifecycle.

    Example:
        registry = CommandRegistry()
        registry.register(BRANCH_COMMAND, handle_branch)
        registry.freeze()
        entry = registry.resolve("branch")
    """

    def __init__(self) -> None:
        self._entries: dict[str, CommandEntry] = {}
        self._frozen = False

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def register(self, definition: CommandDefinition, handler: CommandHandler) -> None:
        """
        Add a command.

        Raises:
            RegistryFrozenError: If the registry was already frozen
            DuplicateCommandError: If the name is already registered
        """
        if self._frozen:
            raise RegistryFrozenError(f"Cannot register {definition.name}: registry is frozen")
        if definition.name in self._entries:
            raise DuplicateCommandError(f"Command {definition.name} is already registered")

        self._entries[definition.name] = CommandEntry(definition=definition, handler=handler)
        log.debug("command_registered", command=definition.name)

    def resolve(self, name: str) -> CommandEntry:
        """
        Look up a command by name.

        Raises:
            CommandNotFoundError: If no command has that name
        """
        try:
            return self._entries[name]
        except KeyError:
            raise CommandNotFoundError(name) from None

    def freeze(self) -> None:
        self._frozen = True

    @property
    def definitions(self) -> list[CommandDefinition]:
        """Definitions in registration order."""
        return [entry.definition for entry in self._entries.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def build_registry(
    commands: Iterable[tuple[CommandDefinition, CommandHandler]] | None = None,
) -> CommandRegistry:
    """Register the given commands (all built-in commands by default) and freeze.

    Raises:
        DuplicateCommandError: If two commands share a name
    """
    if commands is None:
        from ..commands import all_commands

        commands = all_commands()

    registry = CommandRegistry()
    for definition, handler in commands:
        registry.register(definition, handler)
    registry.freeze()

    log.info("registry_built", commands=[d.name for d in registry.definitions])
    return registry
