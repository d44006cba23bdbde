"""Data models and transfer objects."""

from .commands import (
    CommandDefinition,
    DefinitionError,
    OptionChoice,
    OptionDefinition,
    OptionType,
    SubcommandDefinition,
)
from .github import (
    Branch,
    Commit,
    CommitFile,
    Gist,
    GitRef,
    Issue,
    IssueState,
    Release,
    ReleaseAsset,
    Repository,
    Workflow,
    WorkflowList,
)
from .reply import Color, EmbedField, LinkButton, ReplyPayload
from .repository import InvalidRepositoryError, RepositoryRef

__all__ = [
    # Command definitions
    "OptionType",
    "OptionChoice",
    "OptionDefinition",
    "SubcommandDefinition",
    "CommandDefinition",
    "DefinitionError",
    # Repository references
    "RepositoryRef",
    "InvalidRepositoryError",
    # GitHub resources
    "Repository",
    "Branch",
    "GitRef",
    "Commit",
    "CommitFile",
    "IssueState",
    "Issue",
    "Release",
    "ReleaseAsset",
    "Gist",
    "Workflow",
    "WorkflowList",
    # Replies
    "Color",
    "EmbedField",
    "LinkButton",
    "ReplyPayload",
]
