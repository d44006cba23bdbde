"""Data models for rich replies.

A ReplyPayload is platform-neutral: the chat adapter renders it into an
embed plus a row of link buttons. All text is clipped to the platform's
size limits when it is set, so a payload can always be sent as-is.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum

from ..utils.formatting import ELLIPSIS, truncate

TITLE_LIMIT = 256
DESCRIPTION_LIMIT = 4096
FIELD_NAME_LIMIT = 256
FIELD_VALUE_LIMIT = 1024
MAX_FIELDS = 25
EMBED_TOTAL_LIMIT = 6000
MAX_BUTTONS = 5
BUTTON_LABEL_LIMIT = 80

# Zero-width space, used as the name of continuation fields
BLANK_FIELD_NAME = "\u200b"


class Color(IntEnum):
    """Status colors, matching GitHub's palette."""

    BLUE = 0x0366D6
    GREEN = 0x2EA043
    RED = 0xCB2431
    GOLD = 0xFFD700


@dataclass(frozen=True)
class EmbedField:
    """A label/value pair shown in the reply body."""

    name: str
    value: str
    inline: bool = False

    def __post_init__(self) -> None:
        # Empty names and values are rejected by the platform
        name = truncate(self.name or BLANK_FIELD_NAME, FIELD_NAME_LIMIT)
        value = truncate(self.value or BLANK_FIELD_NAME, FIELD_VALUE_LIMIT)
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "value", value)


@dataclass(frozen=True)
class LinkButton:
    """An outbound link button. No callbacks, label and URL only."""

    label: str
    url: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "label", truncate(self.label, BUTTON_LABEL_LIMIT))


@dataclass
class ReplyPayload:
    """A rich reply: title, body, color, fields, link buttons, timestamp."""

    title: str
    description: str | None = None
    color: Color = Color.BLUE
    url: str | None = None
    timestamp: datetime | None = None
    fields: list[EmbedField] = field(default_factory=list)
    buttons: list[LinkButton] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.title = truncate(self.title, TITLE_LIMIT)
        if self.description is not None:
            self.description = truncate(self.description, DESCRIPTION_LIMIT)

    @property
    def total_length(self) -> int:
        """Characters counted against the platform's whole-embed limit."""
        return (
            len(self.title)
            + len(self.description or "")
            + sum(len(f.name) + len(f.value) for f in self.fields)
        )

    def add_field(self, name: str, value: str, inline: bool = False) -> ReplyPayload:
        """Append a field.

        Fields past the platform maximum are dropped. A field that would
        push the embed past its total size limit has its value clipped to
        fit, or is dropped when not even its name and an ellipsis fit.
        """
        if len(self.fields) >= MAX_FIELDS:
            return self

        new_field = EmbedField(name=name, value=value, inline=inline)
        room = EMBED_TOTAL_LIMIT - self.total_length - len(new_field.name)
        if room < len(new_field.value):
            if room < len(ELLIPSIS) + 1:
                return self
            new_field = EmbedField(
                name=new_field.name, value=truncate(new_field.value, room), inline=inline
            )

        self.fields.append(new_field)
        return self

    def add_button(self, label: str, url: str) -> ReplyPayload:
        """Append a link button. Buttons past one action row are dropped."""
        if len(self.buttons) < MAX_BUTTONS:
            self.buttons.append(LinkButton(label=label, url=url))
        return self
