"""Data models for slash-command definitions.

Definitions are static descriptors built once at startup. They carry
everything the chat platform needs to advertise a command and nothing about
how the command is executed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class OptionType(Enum):
    """Typed option kinds, valued with Discord's application-command codes."""

    SUBCOMMAND = 1
    STRING = 3
    INTEGER = 4
    BOOLEAN = 5


class DefinitionError(ValueError):
    """Raised when a command definition violates its invariants."""


@dataclass(frozen=True)
class OptionChoice:
    """One allowed value of an enumerated option."""

    name: str
    value: str | int


@dataclass(frozen=True)
class OptionDefinition:
    """A typed option of a command or subcommand."""

    name: str
    description: str
    type: OptionType = OptionType.STRING
    required: bool = False
    choices: tuple[OptionChoice, ...] = ()

    def __post_init__(self) -> None:
        if self.type is OptionType.SUBCOMMAND:
            raise DefinitionError(f"Option {self.name} cannot be a subcommand")
        if self.choices and self.type is OptionType.BOOLEAN:
            raise DefinitionError(f"Boolean option {self.name} cannot have choices")

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "type": self.type.value,
            "name": self.name,
            "description": self.description,
            "required": self.required,
        }
        if self.choices:
            payload["choices"] = [{"name": c.name, "value": c.value} for c in self.choices]
        return payload


def _check_options(owner: str, options: tuple[OptionDefinition, ...]) -> None:
    """Option names must be unique and required options must come first."""
    seen: set[str] = set()
    optional_seen = False
    for option in options:
        if option.name in seen:
            raise DefinitionError(f"Duplicate option {option.name!r} in {owner}")
        seen.add(option.name)
        if option.required and optional_seen:
            raise DefinitionError(
                f"Required option {option.name!r} follows an optional one in {owner}"
            )
        optional_seen = optional_seen or not option.required


@dataclass(frozen=True)
class SubcommandDefinition:
    """A named subcommand with its own options."""

    name: str
    description: str
    options: tuple[OptionDefinition, ...] = ()

    def __post_init__(self) -> None:
        _check_options(f"subcommand {self.name}", self.options)

    def to_payload(self) -> dict[str, Any]:
        return {
            "type": OptionType.SUBCOMMAND.value,
            "name": self.name,
            "description": self.description,
            "options": [option.to_payload() for option in self.options],
        }


@dataclass(frozen=True)
class CommandDefinition:
    """Static descriptor of a top-level slash command.

    A command either has subcommands or options of its own, never both
    (the platform rejects mixing them at the same level).
    """

    name: str
    description: str
    subcommands: tuple[SubcommandDefinition, ...] = ()
    options: tuple[OptionDefinition, ...] = ()

    def __post_init__(self) -> None:
        if self.subcommands and self.options:
            raise DefinitionError(f"Command {self.name} mixes subcommands and options")
        names = [sub.name for sub in self.subcommands]
        if len(names) != len(set(names)):
            raise DefinitionError(f"Duplicate subcommand in {self.name}")
        _check_options(f"command {self.name}", self.options)

    def to_payload(self) -> dict[str, Any]:
        """Render the registration JSON for the chat platform."""
        if self.subcommands:
            options = [sub.to_payload() for sub in self.subcommands]
        else:
            options = [option.to_payload() for option in self.options]
        return {
            "name": self.name,
            "description": self.description,
            "type": 1,  # CHAT_INPUT
            "options": options,
        }
