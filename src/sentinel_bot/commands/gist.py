"""/gist: create single-file gists."""

from __future__ import annotations

from ..adapters.github import GitHubAPIError
from ..core.interaction import InteractionRequest
from ..interfaces.github import GitHubAPI
from ..models.commands import (
    CommandDefinition,
    OptionDefinition,
    OptionType,
    SubcommandDefinition,
)
from ..models.reply import Color, ReplyPayload
from ..utils.formatting import language_for_filename, truncate
from .base import failure_message, require_write_access, run_subcommand

PREVIEW_LENGTH = 1000

GIST_ERROR_MESSAGE = "Error creating Gist. Please check your GitHub token permissions."

DEFINITION = CommandDefinition(
    name="gist",
    description="Create and manage GitHub Gists",
    subcommands=(
        SubcommandDefinition(
            name="create",
            description="Create a new GitHub Gist",
            options=(
                OptionDefinition(
                    name="filename",
                    description="Filename for the Gist, including extension",
                    required=True,
                ),
                OptionDefinition(
                    name="content", description="Content of the Gist", required=True
                ),
                OptionDefinition(
                    name="public",
                    description="Whether the Gist should be public (default: false)",
                    type=OptionType.BOOLEAN,
                ),
                OptionDefinition(name="description", description="Description for the Gist"),
            ),
        ),
    ),
)


def content_preview(filename: str, content: str) -> str:
    """Fenced, language-tagged preview of the gist content."""
    preview = truncate(content, PREVIEW_LENGTH)
    return f"```{language_for_filename(filename)}\n{preview}\n```"


async def create_gist(request: InteractionRequest, github: GitHubAPI) -> None:
    if not await require_write_access(request, github, "Creating gists"):
        return

    filename = request.get_string("filename") or ""
    content = request.get_string("content") or ""
    public = request.get_boolean("public")
    description = request.get_string("description") or ""

    deferred = await request.reply.defer()

    try:
        gist = await github.create_gist(filename, content, description=description, public=public)
    except GitHubAPIError as e:
        await deferred.finalize(
            failure_message(e, not_found=GIST_ERROR_MESSAGE, generic=GIST_ERROR_MESSAGE)
        )
        return

    payload = ReplyPayload(
        title="Gist Created",
        description=f"[View Gist]({gist.html_url})",
        color=Color.GREEN,
        url=gist.html_url,
    )
    payload.add_field("Filename", filename, inline=True)
    payload.add_field("Visibility", "Public" if public else "Private", inline=True)
    payload.add_field("ID", gist.id or "Unknown", inline=True)
    if description:
        payload.add_field("Description", description)
    payload.add_field("Content Preview", content_preview(filename, content))

    await deferred.finalize(payload)


SUBCOMMANDS = {"create": create_gist}


async def handle(request: InteractionRequest, github: GitHubAPI) -> None:
    await run_subcommand(request, github, SUBCOMMANDS)
