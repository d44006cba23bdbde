"""Abstract interfaces for chat platform integrations."""

from collections.abc import AsyncIterator, Sequence
from typing import TYPE_CHECKING, Protocol

from ..models.commands import CommandDefinition
from ..models.reply import ReplyPayload

if TYPE_CHECKING:
    from ..core.interaction import InteractionRequest


class ReplyChannel(Protocol):
    """Platform primitives for answering a single interaction.

    Handlers never call these directly; they go through
    InteractionReply, which enforces the order in which the
    primitives may be used.
    """

    async def send(self, reply: str | ReplyPayload, ephemeral: bool) -> None:
        """Send the initial response to the interaction."""
        ...

    async def defer(self) -> None:
        """Acknowledge the interaction and show a pending state."""
        ...

    async def edit_original(self, reply: str | ReplyPayload) -> None:
        """Replace the (deferred) original response."""
        ...

    async def followup(self, reply: str | ReplyPayload, ephemeral: bool) -> None:
        """Send an additional message after the initial response."""
        ...


class ChatProvider(Protocol):
    """Abstract interface for chat platform integrations.

    This protocol defines the contract the Discord adapter implements
    and the Bot depends on.
    """

    def register_commands(self, definitions: Sequence[CommandDefinition]) -> None:
        """
        Set the command definitions to advertise on connect.

        Must be called before connect().
        """
        ...

    async def connect(self) -> None:
        """
        Establish connection to the chat platform.

        Registers the command definitions with the platform and
        waits until the client is ready to receive interactions.

        Raises:
            ConnectionError: If connection fails
        """
        ...

    async def disconnect(self) -> None:
        """Gracefully close the connection."""
        ...

    def listen(self) -> AsyncIterator["InteractionRequest"]:
        """
        Yield incoming slash-command interactions.

        Example:
            async for request in provider.listen():
                await dispatcher.dispatch(request)
        """
        ...
