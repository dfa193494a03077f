"""Exceptions raised by the wrapedit core.

Every error here is fatal for the editing session. They propagate out of
the main loop, the terminal is restored, and the CLI reports the message
on stderr.
"""

from typing import Optional


class EditorError(Exception):
    """Base class for wrapedit errors."""


class ResourceExhaustion(EditorError):
    """Backing storage for lines or heights could not grow."""


class LineLengthExceeded(EditorError):
    """A line grew past the configured maximum length."""

    def __init__(self, row: int, limit: int):
        super().__init__(f"Line {row + 1} exceeds the maximum length of {limit} bytes")
        self.row = row
        self.limit = limit


class EditorIOError(EditorError):
    """Reading or writing the document file failed."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path
