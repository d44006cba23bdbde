"""Discord chat adapter using discord.py.

This module implements the ChatProvider protocol for Discord.

Features:
- Guild-scoped slash-command registration on startup
- Raw application-command interactions converted to InteractionRequests
- ReplyPayloads rendered as embeds with a row of link buttons

Only the ``guilds`` gateway intent is requested; slash commands do not
need message content.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import AsyncIterator, Sequence
from typing import Any

import discord
import structlog

from ..config.schema import DiscordConfig
from ..core.interaction import InteractionReply, InteractionRequest
from ..models.commands import CommandDefinition, OptionType
from ..models.reply import ReplyPayload

log = structlog.get_logger()


class DiscordAdapterError(Exception):
    """Base exception for Discord adapter errors."""


class ConnectionError(DiscordAdapterError):
    """Raised when connection to Discord fails."""


def parse_interaction_data(data: dict[str, Any]) -> tuple[str, str | None, dict[str, Any]]:
    """Extract (command, subcommand, options) from raw interaction data.

    Example:
        >>> parse_interaction_data({
        ...     "name": "branch",
        ...     "options": [{"type": 1, "name": "list", "options": [
        ...         {"type": 3, "name": "repository", "value": "octocat/Hello-World"},
        ...     ]}],
        ... })
        ('branch', 'list', {'repository': 'octocat/Hello-World'})
    """
    command = data.get("name", "")
    subcommand: str | None = None
    options: list[dict[str, Any]] = data.get("options") or []

    if options and options[0].get("type") == OptionType.SUBCOMMAND.value:
        subcommand = options[0].get("name")
        options = options[0].get("options") or []

    values = {opt["name"]: opt.get("value") for opt in options if "name" in opt}
    return command, subcommand, values


def build_embed(payload: ReplyPayload) -> discord.Embed:
    """Render a ReplyPayload as a Discord embed."""
    embed = discord.Embed(
        title=payload.title,
        description=payload.description,
        color=int(payload.color),
        url=payload.url,
        timestamp=payload.timestamp,
    )
    for f in payload.fields:
        embed.add_field(name=f.name, value=f.value, inline=f.inline)
    return embed


def build_view(payload: ReplyPayload) -> discord.ui.View | None:
    """Render the payload's link buttons as a single action row.

    Must be called from a running event loop.
    """
    if not payload.buttons:
        return None

    view = discord.ui.View(timeout=None)
    for button in payload.buttons:
        view.add_item(
            discord.ui.Button(style=discord.ButtonStyle.link, label=button.label, url=button.url)
        )
    return view


def _message_kwargs(reply: str | ReplyPayload) -> dict[str, Any]:
    if isinstance(reply, str):
        return {"content": reply}

    kwargs: dict[str, Any] = {"embed": build_embed(reply)}
    view = build_view(reply)
    if view is not None:
        kwargs["view"] = view
    return kwargs


class DiscordReplyChannel:
    """ReplyChannel backed by a discord.py Interaction."""

    def __init__(self, interaction: discord.Interaction) -> None:
        self._interaction = interaction

    async def send(self, reply: str | ReplyPayload, ephemeral: bool) -> None:
        await self._interaction.response.send_message(ephemeral=ephemeral, **_message_kwargs(reply))

    async def defer(self) -> None:
        await self._interaction.response.defer()

    async def edit_original(self, reply: str | ReplyPayload) -> None:
        kwargs = _message_kwargs(reply)
        if isinstance(reply, str):
            kwargs["embeds"] = []
        else:
            kwargs["content"] = None
        await self._interaction.edit_original_response(**kwargs)

    async def followup(self, reply: str | ReplyPayload, ephemeral: bool) -> None:
        await self._interaction.followup.send(ephemeral=ephemeral, **_message_kwargs(reply))


class _SentinelClient(discord.Client):
    """discord.Client that forwards lifecycle events to the adapter."""

    def __init__(self, adapter: DiscordAdapter) -> None:
        super().__init__(intents=discord.Intents(guilds=True))
        self._adapter = adapter

    async def setup_hook(self) -> None:
        await self._adapter._sync_commands()

    async def on_ready(self) -> None:
        self._adapter._on_ready()

    async def on_interaction(self, interaction: discord.Interaction) -> None:
        await self._adapter._process_interaction(interaction)


class DiscordAdapter:
    """Discord chat adapter implementing the ChatProvider protocol.

    Example:
        adapter = DiscordAdapter(DiscordConfig(token="...", client_id=1, guild_id=2))
        adapter.register_commands(registry.definitions)

        await adapter.connect()
        async for request in adapter.listen():
            await dispatcher.dispatch(request)
        await adapter.disconnect()
    """

    def __init__(self, config: DiscordConfig) -> None:
        """Initialize the Discord adapter.

        Args:
            config: Discord-specific configuration.
        """
        self._config = config
        self._connected = False
        self._definitions: list[CommandDefinition] = []

        self._client = _SentinelClient(self)
        self._client_task: asyncio.Task[None] | None = None

        # Interaction queue feeding listen()
        self._queue: asyncio.Queue[InteractionRequest] = asyncio.Queue()

        self._ready_event = asyncio.Event()
        self._disconnect_event = asyncio.Event()

    def register_commands(self, definitions: Sequence[CommandDefinition]) -> None:
        self._definitions = list(definitions)

    async def _sync_commands(self) -> None:
        """Push the command definitions to the guild. Failure is logged, not raised."""
        payload = [definition.to_payload() for definition in self._definitions]
        try:
            await self._client.http.bulk_upsert_guild_commands(
                self._config.client_id, self._config.guild_id, payload
            )
        except discord.HTTPException as e:
            log.error(
                "command_registration_failed",
                guild_id=self._config.guild_id,
                status=e.status,
                error=str(e),
            )
            return

        log.info(
            "commands_registered",
            guild_id=self._config.guild_id,
            commands=[d["name"] for d in payload],
        )

    def _on_ready(self) -> None:
        user = self._client.user
        log.info("discord_ready", user=str(user) if user else None)
        self._ready_event.set()

    async def _process_interaction(self, interaction: discord.Interaction) -> None:
        """Queue application-command interactions; ignore everything else."""
        if interaction.type is not discord.InteractionType.application_command:
            return

        data: dict[str, Any] = dict(interaction.data or {})
        command, subcommand, options = parse_interaction_data(data)

        request = InteractionRequest(
            command=command,
            subcommand=subcommand,
            options=options,
            user_id=str(interaction.user.id),
            user_name=interaction.user.name,
            interaction_id=str(interaction.id),
            reply=InteractionReply(DiscordReplyChannel(interaction)),
        )

        await self._queue.put(request)
        log.debug(
            "interaction_queued",
            command=command,
            subcommand=subcommand,
            interaction_id=request.interaction_id,
        )

    async def connect(self) -> None:
        """Log in, register commands and wait until the gateway is ready.

        Raises:
            ConnectionError: If login or the gateway connection fails.
        """
        if self._connected:
            return

        self._ready_event.clear()
        self._disconnect_event.clear()
        self._client_task = asyncio.create_task(
            self._client.start(self._config.token), name="discord_client"
        )
        ready_task = asyncio.create_task(self._ready_event.wait())

        done, _ = await asyncio.wait(
            {self._client_task, ready_task}, return_when=asyncio.FIRST_COMPLETED
        )

        if ready_task not in done:
            ready_task.cancel()
            error = self._client_task.exception()
            log.error("discord_connection_failed", error=str(error))
            raise ConnectionError(f"Failed to connect to Discord: {error}") from error

        self._connected = True
        log.info("discord_connected", guild_id=self._config.guild_id)

    async def disconnect(self) -> None:
        """Gracefully close the Discord connection."""
        if not self._connected:
            return

        self._disconnect_event.set()

        try:
            await self._client.close()
        except discord.DiscordException as e:
            log.warning("disconnect_error", error=str(e))

        if self._client_task is not None:
            with contextlib.suppress(asyncio.CancelledError, discord.DiscordException):
                await self._client_task

        self._connected = False
        log.info("discord_disconnected")

    async def listen(self) -> AsyncIterator[InteractionRequest]:
        """Yield incoming slash-command interactions.

        Yields:
            InteractionRequest: Each application-command invocation.
        """
        if not self._connected:
            raise DiscordAdapterError("Not connected. Call connect() first.")

        while not self._disconnect_event.is_set():
            try:
                # Wake up periodically to notice disconnect()
                request = await asyncio.wait_for(self._queue.get(), timeout=1.0)
                yield request
            except TimeoutError:
                continue
            except asyncio.CancelledError:
                break
