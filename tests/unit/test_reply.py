"""Tests for reply payload models."""

from sentinel_bot.models.reply import (
    BLANK_FIELD_NAME,
    EMBED_TOTAL_LIMIT,
    MAX_BUTTONS,
    MAX_FIELDS,
    Color,
    EmbedField,
    LinkButton,
    ReplyPayload,
)


class TestColor:
    """Tests for status colors."""

    def test_color_values(self) -> None:
        assert Color.BLUE == 0x0366D6
        assert Color.GREEN == 0x2EA043
        assert Color.RED == 0xCB2431
        assert Color.GOLD == 0xFFD700


class TestEmbedField:
    """Tests for EmbedField limits."""

    def test_long_value_truncated(self) -> None:
        field = EmbedField(name="Files", value="x" * 2000)
        assert len(field.value) == 1024
        assert field.value.endswith("...")

    def test_long_name_truncated(self) -> None:
        field = EmbedField(name="n" * 300, value="v")
        assert len(field.name) == 256

    def test_empty_name_replaced(self) -> None:
        """Test an empty name becomes a zero-width space."""
        assert EmbedField(name="", value="v").name == BLANK_FIELD_NAME

    def test_inline_default(self) -> None:
        assert EmbedField(name="a", value="b").inline is False


class TestReplyPayload:
    """Tests for ReplyPayload."""

    def test_defaults(self) -> None:
        payload = ReplyPayload(title="Hello")
        assert payload.color == Color.BLUE
        assert payload.description is None
        assert payload.fields == []
        assert payload.buttons == []

    def test_title_and_description_truncated(self) -> None:
        payload = ReplyPayload(title="t" * 300, description="d" * 5000)
        assert len(payload.title) == 256
        assert len(payload.description or "") == 4096
        assert payload.title.endswith("...")

    def test_add_field_chains(self) -> None:
        payload = ReplyPayload(title="x").add_field("a", "1", inline=True).add_field("b", "2")
        assert [f.name for f in payload.fields] == ["a", "b"]
        assert payload.fields[0].inline is True

    def test_fields_capped(self) -> None:
        """Test fields past the maximum are dropped."""
        payload = ReplyPayload(title="x")
        for i in range(MAX_FIELDS + 5):
            payload.add_field(str(i), "v")
        assert len(payload.fields) == MAX_FIELDS
        assert payload.fields[-1].name == str(MAX_FIELDS - 1)

    def test_total_length_counts_text(self) -> None:
        payload = ReplyPayload(title="abc", description="de").add_field("f", "ghij")
        assert payload.total_length == 10

    def test_total_length_capped(self) -> None:
        """Test fields never push the embed past its total size limit."""
        payload = ReplyPayload(title="t" * 256, description="d" * 1000)
        for i in range(MAX_FIELDS):
            payload.add_field(f"{i}: " + "n" * 200, "v" * 300)

        assert payload.total_length == EMBED_TOTAL_LIMIT
        assert payload.fields[-1].value.endswith("...")
        assert len(payload.fields) < MAX_FIELDS

    def test_field_dropped_when_name_does_not_fit(self) -> None:
        payload = ReplyPayload(title="x", description="d" * 4000)
        payload.add_field("a", "v" * 1000).add_field("b", "v" * 990)
        before = payload.total_length

        payload.add_field("n" * 200, "value")

        assert payload.total_length == before
        assert [f.name for f in payload.fields] == ["a", "b"]

    def test_buttons_capped(self) -> None:
        payload = ReplyPayload(title="x")
        for i in range(MAX_BUTTONS + 2):
            payload.add_button(f"b{i}", "https://github.com")
        assert len(payload.buttons) == MAX_BUTTONS

    def test_button_label_truncated(self) -> None:
        button = LinkButton(label="l" * 100, url="https://github.com")
        assert len(button.label) == 80
