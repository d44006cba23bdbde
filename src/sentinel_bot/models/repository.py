"""Repository references parsed from user input."""

from dataclasses import dataclass


class InvalidRepositoryError(ValueError):
    """Raised when a repository reference is not of the form owner/repo."""


@dataclass(frozen=True)
class RepositoryRef:
    """An (owner, name) pair identifying a repository."""

    owner: str
    name: str

    @classmethod
    def parse(cls, value: str | None) -> "RepositoryRef":
        """
        Parse an ``owner/repo`` string.

        The string must contain exactly one ``/`` separating two non-empty
        parts. Surrounding whitespace is ignored.

        Raises:
            InvalidRepositoryError: If the reference is malformed
        """
        if value is None:
            raise InvalidRepositoryError("Repository reference is missing")

        parts = value.strip().split("/")
        if len(parts) != 2:
            raise InvalidRepositoryError(f"Invalid repository reference: {value!r}")

        owner, name = (part.strip() for part in parts)
        if not owner or not name:
            raise InvalidRepositoryError(f"Invalid repository reference: {value!r}")

        return cls(owner=owner, name=name)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def html_url(self) -> str:
        return f"https://github.com/{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.full_name
