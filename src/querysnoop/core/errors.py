# src/querysnoop/core/errors.py
from __future__ import annotations

import os
from typing import Optional, Union

__all__ = [
    "QuerySnoopError",
    "InvalidArgument",
    "RegistryLocked",
    "QuerySourceError",
    "InputMissing",
    "InputUnreadable",
    "IOFailure",
]

Source = Union[str, "os.PathLike[str]"]


class QuerySnoopError(Exception):
    """Root of everything this package raises on purpose."""


class InvalidArgument(QuerySnoopError, ValueError):
    """A required parameter was None, empty or of the wrong kind."""


class RegistryLocked(QuerySnoopError, RuntimeError):
    """Registration attempted while the dispatcher is frozen or dispatching."""


class QuerySourceError(QuerySnoopError):
    """Failure reading the query file. ``source`` names the file."""

    def __init__(self, message: str, source: Optional[Source] = None):
        super().__init__(message)
        self.source = source

    def __str__(self) -> str:
        msg = self.args[0] if self.args else ""
        if self.source is None:
            return msg
        return f"{msg}: {os.fspath(self.source)}"


class InputMissing(QuerySourceError, FileNotFoundError):
    pass


class InputUnreadable(QuerySourceError, PermissionError):
    """Path exists but is not a regular, readable file."""


class IOFailure(QuerySourceError, OSError):
    """Read fault after validation (open race, disk error, bad bytes)."""
