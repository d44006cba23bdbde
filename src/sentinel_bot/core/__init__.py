"""Core bot logic: interactions, registry, dispatch and lifecycle."""

from .bot import Bot, BotError, StartupError, create_bot
from .dispatcher import Dispatcher
from .interaction import (
    DeferredReply,
    InteractionReply,
    InteractionRequest,
    ReplyState,
    ReplyStateError,
)
from .registry import (
    CommandEntry,
    CommandNotFoundError,
    CommandRegistry,
    DuplicateCommandError,
    RegistryError,
    RegistryFrozenError,
    build_registry,
)

__all__ = [
    "Bot",
    "BotError",
    "CommandEntry",
    "CommandNotFoundError",
    "CommandRegistry",
    "DeferredReply",
    "Dispatcher",
    "DuplicateCommandError",
    "InteractionReply",
    "InteractionRequest",
    "RegistryError",
    "RegistryFrozenError",
    "ReplyState",
    "ReplyStateError",
    "StartupError",
    "build_registry",
    "create_bot",
]
