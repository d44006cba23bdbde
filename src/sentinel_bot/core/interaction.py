"""Interaction requests and the two-phase reply handle.

Every interaction is answered through an InteractionReply, which
tracks how the interaction has been acknowledged so far:

    PENDING -> REPLIED                 (send / send_ephemeral)
    PENDING -> DEFERRED -> FINALIZED   (defer, then DeferredReply.finalize)

Ephemeral replies are only possible from PENDING, because the platform
cannot turn a deferred response into an ephemeral one. A deferred reply
may be finalized once. Any other use raises ReplyStateError.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import structlog

from ..interfaces.chat import ReplyChannel
from ..models.reply import ReplyPayload

log = structlog.get_logger()


class ReplyStateError(Exception):
    """Raised when a reply operation is not allowed in the current state."""


class ReplyState(Enum):
    """Acknowledgment state of an interaction."""

    PENDING = "pending"
    REPLIED = "replied"
    DEFERRED = "deferred"
    FINALIZED = "finalized"


class DeferredReply:
    """Token returned by InteractionReply.defer().

    Holding one proves the interaction was acknowledged; finalize() edits
    the pending response into the final one, exactly once.
    """

    def __init__(self, reply: InteractionReply) -> None:
        self._reply = reply

    async def finalize(self, reply: str | ReplyPayload) -> None:
        """Replace the pending response with the final reply.

        Raises:
            ReplyStateError: If the reply was already finalized
        """
        await self._reply._finalize(reply)


class InteractionReply:
    """Enforces the order in which a ReplyChannel may be used."""

    def __init__(self, channel: ReplyChannel) -> None:
        self._channel = channel
        self._state = ReplyState.PENDING

    @property
    def state(self) -> ReplyState:
        return self._state

    @property
    def is_used(self) -> bool:
        """True once the interaction has been acknowledged in any way."""
        return self._state is not ReplyState.PENDING

    def _require_pending(self, operation: str) -> None:
        if self._state is not ReplyState.PENDING:
            raise ReplyStateError(f"Cannot {operation}: interaction is already {self._state.value}")

    async def send(self, reply: str | ReplyPayload) -> None:
        """Answer the interaction immediately with a public reply."""
        self._require_pending("send")
        await self._channel.send(reply, ephemeral=False)
        self._state = ReplyState.REPLIED

    async def send_ephemeral(self, reply: str | ReplyPayload) -> None:
        """Answer the interaction immediately, visible only to the invoker."""
        self._require_pending("send an ephemeral reply")
        await self._channel.send(reply, ephemeral=True)
        self._state = ReplyState.REPLIED

    async def defer(self) -> DeferredReply:
        """Acknowledge the interaction with a pending state.

        Returns:
            DeferredReply used to deliver the final reply

        Raises:
            ReplyStateError: If the interaction was already acknowledged
        """
        self._require_pending("defer")
        await self._channel.defer()
        self._state = ReplyState.DEFERRED
        return DeferredReply(self)

    async def _finalize(self, reply: str | ReplyPayload) -> None:
        if self._state is not ReplyState.DEFERRED:
            raise ReplyStateError(f"Cannot finalize: interaction is {self._state.value}")
        await self._channel.edit_original(reply)
        self._state = ReplyState.FINALIZED

    async def fail(self, text: str) -> None:
        """Report a failure to the invoker, whatever the current state.

        Sends an ephemeral reply while the interaction is still pending,
        and an ephemeral follow-up once it has been acknowledged.
        """
        if self._state is ReplyState.PENDING:
            await self._channel.send(text, ephemeral=True)
            self._state = ReplyState.REPLIED
        else:
            await self._channel.followup(text, ephemeral=True)


@dataclass
class InteractionRequest:
    """A single slash-command invocation.

    Created by the chat adapter per user invocation and consumed by
    exactly one handler.
    """

    command: str
    reply: InteractionReply
    subcommand: str | None = None
    options: dict[str, Any] = field(default_factory=dict)
    user_id: str = ""
    user_name: str = ""
    interaction_id: str = ""

    def get_string(self, name: str, default: str | None = None) -> str | None:
        value = self.options.get(name)
        if value is None:
            return default
        return str(value)

    def get_integer(self, name: str, default: int | None = None) -> int | None:
        value = self.options.get(name)
        if value is None or isinstance(value, bool):
            return default
        try:
            return int(value)
        except (TypeError, ValueError):
            log.debug("option_not_an_integer", option=name, value=value)
            return default

    def get_boolean(self, name: str, default: bool = False) -> bool:
        value = self.options.get(name)
        if isinstance(value, bool):
            return value
        return default
