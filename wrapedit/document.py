"""Line storage for the editor.

A document is an ordered list of byte strings. Each line keeps whatever
terminator it carries (``\\r\\n``, or a legacy bare ``\\n`` / ``\\r``); only
the last line may lack one.
"""

import logging
from typing import Iterable, Iterator, Optional

from .errors import ResourceExhaustion

logger = logging.getLogger(__name__)

CRLF = b"\r\n"


def terminator_length(line: bytes) -> int:
    """Return the length of the trailing line terminator (0, 1 or 2)."""
    if line.endswith(CRLF):
        return 2
    if line.endswith(b"\n") or line.endswith(b"\r"):
        return 1
    return 0


def visible_length(line: bytes) -> int:
    """Byte length of ``line`` without its terminator."""
    return len(line) - terminator_length(line)


def strip_terminator(line: bytes) -> bytes:
    return bytes(line[:visible_length(line)])


class Document:
    """Ordered collection of committed lines.

    The document owns its lines: every stored value is an immutable
    ``bytes`` copy, so a caller's buffer is never aliased and replacing a
    line drops the previous value.
    """

    def __init__(self, lines: Optional[Iterable[bytes]] = None):
        self._lines: list[bytes] = [bytes(line) for line in (lines or [])]
        # Bumped on every change of content or line count
        self.version = 0

    def __len__(self) -> int:
        return len(self._lines)

    def __getitem__(self, row: int) -> bytes:
        return self._lines[row]

    def __iter__(self) -> Iterator[bytes]:
        return iter(self._lines)

    @property
    def lines(self) -> tuple[bytes, ...]:
        return tuple(self._lines)

    def line(self, row: int) -> bytes:
        """Return line ``row``; the virtual line past the end is empty."""
        if row == len(self._lines):
            return b""
        return self._lines[row]

    def visible_length(self, row: int) -> int:
        return visible_length(self.line(row))

    def commit_line(self, row: int, content: bytes) -> None:
        """Store ``content`` as line ``row``.

        ``row`` may equal the current length, which appends a new line.
        """
        if row < 0 or row > len(self._lines):
            raise IndexError(f"commit_line: row {row} outside 0..{len(self._lines)}")
        value = bytes(content)
        if row == len(self._lines):
            self._append(value)
        elif self._lines[row] != value:
            self._lines[row] = value
            self.version += 1

    def promote_virtual(self, row: int) -> bool:
        """Create an empty real line if ``row`` is the virtual line.

        Returns True when a line was created.
        """
        if row != len(self._lines):
            return False
        self._append(b"")
        return True

    def insert_line_at(self, row: int, content: bytes = b"") -> None:
        if row < 0 or row > len(self._lines):
            raise IndexError(f"insert_line_at: row {row} outside 0..{len(self._lines)}")
        try:
            self._lines.insert(row, bytes(content))
        except MemoryError as exc:
            logger.error("Could not grow line storage to %d lines", len(self._lines) + 1)
            raise ResourceExhaustion("Out of memory while inserting a line") from exc
        self.version += 1

    def remove_line_at(self, row: int) -> bytes:
        """Remove line ``row`` and return its content."""
        removed = self._lines.pop(row)
        self.version += 1
        return removed

    def to_bytes(self) -> bytes:
        return b"".join(self._lines)

    def _append(self, value: bytes) -> None:
        try:
            self._lines.append(value)
        except MemoryError as exc:
            logger.error("Could not grow line storage to %d lines", len(self._lines) + 1)
            raise ResourceExhaustion("Out of memory while adding a line") from exc
        self.version += 1
