"""Tests for slash-command definition models."""

import pytest

from sentinel_bot.models.commands import (
    CommandDefinition,
    DefinitionError,
    OptionChoice,
    OptionDefinition,
    OptionType,
    SubcommandDefinition,
)


class TestOptionDefinition:
    """Tests for OptionDefinition."""

    def test_payload(self) -> None:
        option = OptionDefinition(name="limit", description="How many", type=OptionType.INTEGER)
        assert option.to_payload() == {
            "type": 4,
            "name": "limit",
            "description": "How many",
            "required": False,
        }

    def test_payload_with_choices(self) -> None:
        option = OptionDefinition(
            name="state",
            description="Issue state",
            choices=(OptionChoice("Open", "open"), OptionChoice("All", "all")),
        )
        assert option.to_payload()["choices"] == [
            {"name": "Open", "value": "open"},
            {"name": "All", "value": "all"},
        ]

    def test_subcommand_type_rejected(self) -> None:
        with pytest.raises(DefinitionError):
            OptionDefinition(name="x", description="x", type=OptionType.SUBCOMMAND)

    def test_boolean_choices_rejected(self) -> None:
        with pytest.raises(DefinitionError):
            OptionDefinition(
                name="x",
                description="x",
                type=OptionType.BOOLEAN,
                choices=(OptionChoice("yes", "yes"),),
            )


class TestSubcommandDefinition:
    """Tests for SubcommandDefinition invariants."""

    def test_duplicate_option_names_rejected(self) -> None:
        with pytest.raises(DefinitionError, match="Duplicate option"):
            SubcommandDefinition(
                name="list",
                description="List",
                options=(
                    OptionDefinition(name="repo", description="a"),
                    OptionDefinition(name="repo", description="b"),
                ),
            )

    def test_required_after_optional_rejected(self) -> None:
        with pytest.raises(DefinitionError, match="follows an optional"):
            SubcommandDefinition(
                name="create",
                description="Create",
                options=(
                    OptionDefinition(name="from", description="a"),
                    OptionDefinition(name="name", description="b", required=True),
                ),
            )

    def test_payload(self) -> None:
        sub = SubcommandDefinition(
            name="latest",
            description="Latest",
            options=(OptionDefinition(name="repo", description="Repo", required=True),),
        )
        payload = sub.to_payload()
        assert payload["type"] == 1
        assert payload["options"][0]["required"] is True


class TestCommandDefinition:
    """Tests for CommandDefinition."""

    def test_mixing_subcommands_and_options_rejected(self) -> None:
        with pytest.raises(DefinitionError, match="mixes"):
            CommandDefinition(
                name="bad",
                description="Bad",
                subcommands=(SubcommandDefinition(name="a", description="a"),),
                options=(OptionDefinition(name="b", description="b"),),
            )

    def test_duplicate_subcommands_rejected(self) -> None:
        with pytest.raises(DefinitionError, match="Duplicate subcommand"):
            CommandDefinition(
                name="bad",
                description="Bad",
                subcommands=(
                    SubcommandDefinition(name="a", description="a"),
                    SubcommandDefinition(name="a", description="b"),
                ),
            )

    def test_payload_with_subcommands(self) -> None:
        command = CommandDefinition(
            name="release",
            description="Releases",
            subcommands=(SubcommandDefinition(name="latest", description="Latest"),),
        )
        payload = command.to_payload()
        assert payload["name"] == "release"
        assert payload["type"] == 1
        assert payload["options"][0]["name"] == "latest"

    def test_payload_with_options(self) -> None:
        command = CommandDefinition(
            name="star",
            description="Star",
            options=(OptionDefinition(name="repository", description="Repo", required=True),),
        )
        assert command.to_payload()["options"][0]["type"] == OptionType.STRING.value
