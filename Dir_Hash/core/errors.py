from pathlib import Path
from typing import Optional, Union


class DirHashError(Exception):
    """Base class for every fatal error raised while hashing a tree."""


class InvalidPatternError(DirHashError, ValueError):
    """
    An ignore pattern could not be compiled.

    Raised before any traversal happens; nothing from the failed
    compilation is kept.
    """

    def __init__(self, pattern: str, source: str = "inline", reason: Optional[str] = None):
        self.pattern = pattern
        self.source = source
        self.reason = reason
        message = f"invalid ignore pattern {pattern!r} ({source})"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class DirHashIOError(DirHashError, OSError):
    """A file selected for hashing (or the root itself) could not be read."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{reason}: {path}")

    def __str__(self) -> str:
        return f"{self.reason}: {self.path}"
