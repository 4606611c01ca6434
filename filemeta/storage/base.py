"""File handle passed to extraction backends."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class FileHandle:
    """A resolved, readable local file.

    Created by the resolver and immutable for the duration of one extraction.
    """

    path: Path
    identifier: str
    public_url: str = ""

    @property
    def name(self) -> str:
        """Get the filename without path."""
        return self.path.name

    @property
    def extension(self) -> str:
        """Get the lowercase file extension without the dot."""
        return self.path.suffix.lower().lstrip(".")

    def __str__(self) -> str:
        return f"FileHandle({self.identifier})"
