"""Tests for the Discord chat adapter."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from sentinel_bot.adapters.discord import (
    ConnectionError,
    DiscordAdapter,
    DiscordAdapterError,
    DiscordReplyChannel,
    build_embed,
    build_view,
    parse_interaction_data,
)
from sentinel_bot.config.schema import DiscordConfig
from sentinel_bot.core.interaction import InteractionRequest
from sentinel_bot.models.commands import CommandDefinition
from sentinel_bot.models.reply import Color, ReplyPayload


@pytest.fixture
def discord_config() -> DiscordConfig:
    """Create a test Discord configuration."""
    return DiscordConfig(token="discord-test-token", client_id=111, guild_id=222)


def _interaction(data: dict | None = None) -> MagicMock:
    interaction = MagicMock()
    interaction.type = discord.InteractionType.application_command
    interaction.data = data or {"name": "star", "options": []}
    interaction.id = 9876
    interaction.user.id = 1234
    interaction.user.name = "octocat"
    interaction.response.send_message = AsyncMock()
    interaction.response.defer = AsyncMock()
    interaction.edit_original_response = AsyncMock()
    interaction.followup.send = AsyncMock()
    return interaction


def _payload() -> ReplyPayload:
    payload = ReplyPayload(
        title="Branch Created",
        description="Successfully created branch `dev`",
        color=Color.GREEN,
        url="https://github.com/octocat/Hello-World/tree/dev",
    )
    payload.add_field("Repository", "octocat/Hello-World", inline=True)
    payload.add_button("View Branch", "https://github.com/octocat/Hello-World/tree/dev")
    return payload


class TestParseInteractionData:
    """Tests for parse_interaction_data()."""

    def test_subcommand(self) -> None:
        data = {
            "name": "branch",
            "options": [
                {
                    "type": 1,
                    "name": "list",
                    "options": [
                        {"type": 3, "name": "repository", "value": "octocat/Hello-World"},
                        {"type": 5, "name": "protected", "value": True},
                    ],
                }
            ],
        }

        assert parse_interaction_data(data) == (
            "branch",
            "list",
            {"repository": "octocat/Hello-World", "protected": True},
        )

    def test_flat_options(self) -> None:
        data = {
            "name": "commit",
            "options": [
                {"type": 3, "name": "repo", "value": "octocat/Hello-World"},
                {"type": 4, "name": "limit", "value": 3},
            ],
        }

        assert parse_interaction_data(data) == (
            "commit",
            None,
            {"repo": "octocat/Hello-World", "limit": 3},
        )

    def test_subcommand_without_options(self) -> None:
        data = {"name": "release", "options": [{"type": 1, "name": "latest"}]}
        assert parse_interaction_data(data) == ("release", "latest", {})

    def test_no_options(self) -> None:
        assert parse_interaction_data({"name": "star"}) == ("star", None, {})


class TestRendering:
    """Tests for embed and view rendering."""

    def test_build_embed(self) -> None:
        embed = build_embed(_payload())

        assert embed.title == "Branch Created"
        assert embed.description == "Successfully created branch `dev`"
        assert embed.color is not None
        assert embed.color.value == Color.GREEN.value
        assert embed.url == "https://github.com/octocat/Hello-World/tree/dev"
        assert [(f.name, f.value, f.inline) for f in embed.fields] == [
            ("Repository", "octocat/Hello-World", True)
        ]

    async def test_build_view(self) -> None:
        view = build_view(_payload())

        assert view is not None
        assert view.timeout is None
        button = view.children[0]
        assert isinstance(button, discord.ui.Button)
        assert button.style is discord.ButtonStyle.link
        assert button.label == "View Branch"
        assert button.url == "https://github.com/octocat/Hello-World/tree/dev"

    def test_build_view_without_buttons(self) -> None:
        assert build_view(ReplyPayload(title="Plain")) is None


class TestDiscordReplyChannel:
    """Tests for the ReplyChannel primitives."""

    async def test_send_text(self) -> None:
        interaction = _interaction()

        await DiscordReplyChannel(interaction).send("hello", ephemeral=True)

        interaction.response.send_message.assert_awaited_once_with(
            ephemeral=True, content="hello"
        )

    async def test_send_payload(self) -> None:
        interaction = _interaction()

        await DiscordReplyChannel(interaction).send(_payload(), ephemeral=False)

        kwargs = interaction.response.send_message.await_args.kwargs
        assert kwargs["ephemeral"] is False
        assert isinstance(kwargs["embed"], discord.Embed)
        assert isinstance(kwargs["view"], discord.ui.View)

    async def test_defer(self) -> None:
        interaction = _interaction()

        await DiscordReplyChannel(interaction).defer()

        interaction.response.defer.assert_awaited_once_with()

    async def test_edit_original_text_clears_embeds(self) -> None:
        interaction = _interaction()

        await DiscordReplyChannel(interaction).edit_original("done")

        interaction.edit_original_response.assert_awaited_once_with(content="done", embeds=[])

    async def test_edit_original_payload_clears_content(self) -> None:
        interaction = _interaction()

        await DiscordReplyChannel(interaction).edit_original(ReplyPayload(title="Done"))

        kwargs = interaction.edit_original_response.await_args.kwargs
        assert kwargs["content"] is None
        assert kwargs["embed"].title == "Done"
        assert "view" not in kwargs

    async def test_followup(self) -> None:
        interaction = _interaction()

        await DiscordReplyChannel(interaction).followup("oops", ephemeral=True)

        interaction.followup.send.assert_awaited_once_with(ephemeral=True, content="oops")


class TestCommandSync:
    """Tests for guild command registration."""

    async def test_sync_pushes_payloads(self, discord_config: DiscordConfig) -> None:
        adapter = DiscordAdapter(discord_config)
        adapter._client.http.bulk_upsert_guild_commands = AsyncMock(return_value=[])
        adapter.register_commands([CommandDefinition(name="ping", description="Ping")])

        await adapter._sync_commands()

        adapter._client.http.bulk_upsert_guild_commands.assert_awaited_once_with(
            111, 222, [{"name": "ping", "description": "Ping", "options": [], "type": 1}]
        )

    async def test_sync_failure_is_logged(self, discord_config: DiscordConfig) -> None:
        adapter = DiscordAdapter(discord_config)
        response = MagicMock(status=403, reason="Forbidden")
        adapter._client.http.bulk_upsert_guild_commands = AsyncMock(
            side_effect=discord.HTTPException(response, "Missing Access")
        )

        await adapter._sync_commands()


class TestInteractionQueue:
    """Tests for turning raw interactions into requests."""

    async def test_application_command_queued(self, discord_config: DiscordConfig) -> None:
        adapter = DiscordAdapter(discord_config)
        interaction = _interaction(
            {
                "name": "star",
                "options": [{"type": 3, "name": "repository", "value": "octocat/Hello-World"}],
            }
        )

        await adapter._client.on_interaction(interaction)

        request = adapter._queue.get_nowait()
        assert isinstance(request, InteractionRequest)
        assert request.command == "star"
        assert request.subcommand is None
        assert request.options == {"repository": "octocat/Hello-World"}
        assert request.user_id == "1234"
        assert request.user_name == "octocat"
        assert request.interaction_id == "9876"

    async def test_other_interactions_ignored(self, discord_config: DiscordConfig) -> None:
        adapter = DiscordAdapter(discord_config)
        interaction = _interaction()
        interaction.type = discord.InteractionType.component

        await adapter._process_interaction(interaction)

        assert adapter._queue.empty()

    async def test_listen_requires_connection(self, discord_config: DiscordConfig) -> None:
        adapter = DiscordAdapter(discord_config)

        with pytest.raises(DiscordAdapterError, match="Not connected"):
            await adapter.listen().__anext__()

    async def test_listen_yields_requests(self, discord_config: DiscordConfig) -> None:
        adapter = DiscordAdapter(discord_config)
        adapter._connected = True
        await adapter._process_interaction(_interaction())

        stream = adapter.listen()
        request = await stream.__anext__()
        await stream.aclose()

        assert request.command == "star"


class TestConnection:
    """Tests for connect/disconnect."""

    async def test_connect_waits_for_ready(self, discord_config: DiscordConfig) -> None:
        adapter = DiscordAdapter(discord_config)

        async def fake_start(token: str) -> None:
            assert token == "discord-test-token"
            adapter._on_ready()
            await adapter._disconnect_event.wait()

        adapter._client.start = fake_start  # type: ignore[method-assign]
        adapter._client.close = AsyncMock()  # type: ignore[method-assign]

        await adapter.connect()
        assert adapter._connected is True

        await adapter.disconnect()
        adapter._client.close.assert_awaited_once()
        assert adapter._connected is False

    async def test_connect_login_failure(self, discord_config: DiscordConfig) -> None:
        adapter = DiscordAdapter(discord_config)
        adapter._client.start = AsyncMock(  # type: ignore[method-assign]
            side_effect=discord.LoginFailure("Improper token has been passed.")
        )

        with pytest.raises(ConnectionError, match="Improper token"):
            await adapter.connect()
        assert adapter._connected is False

    async def test_disconnect_when_not_connected(self, discord_config: DiscordConfig) -> None:
        adapter = DiscordAdapter(discord_config)
        adapter._client.close = AsyncMock()  # type: ignore[method-assign]

        await adapter.disconnect()

        adapter._client.close.assert_not_awaited()

