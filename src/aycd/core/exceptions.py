"""Exceptions raised by the project and document stores.

Every failure the stores report is a :class:`StoreError`. The facade turns
them into display strings; nothing below it catches them except the
listing operations, which skip unreadable items.
"""

from pathlib import Path


class StoreError(Exception):
    """Base exception for all store failures.

    Attributes:
        message: Human-readable description of what failed.
        path: The filesystem path involved, when there is one.
    """

    def __init__(self, message: str, path: Path | str | None = None):
        self.message = message
        self.path = Path(path) if path is not None else None
        super().__init__(message)


class NotFoundError(StoreError):
    """A file or directory that must exist does not."""


class AlreadyExistsError(StoreError):
    """A create operation collided with an existing path."""


class InvalidProjectError(StoreError):
    """A directory is not a project (no descriptor, or an empty id)."""


class CorruptDescriptorError(StoreError):
    """The project descriptor exists but cannot be parsed."""


class PathTraversalError(StoreError):
    """A resolved path escapes its base directory."""


class NoHomeDirectoryError(StoreError):
    """The user's home directory cannot be determined."""


class StoreIOError(StoreError):
    """An underlying filesystem call failed."""
