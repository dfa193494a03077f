"""Per-line visual height cache.

Keeps one entry per document line holding the number of terminal rows the
line occupies when wrapped at the viewport width, plus a prefix-sum index
used by the viewport for scroll and cursor math.
"""

from typing import Iterable

from .document import visible_length
from .errors import ResourceExhaustion


def wrap_height(line: bytes, width: int) -> int:
    """Number of rows ``line`` needs at ``width`` columns.

    Terminators do not count. Empty lines still take one row, and a width
    of 0 disables wrapping.
    """
    length = visible_length(line)
    if width <= 0 or length == 0:
        return 1
    return -(-length // width)


class VisualHeightCache:
    """Wrap heights aligned index-for-index with the document lines."""

    def __init__(self, width: int, lines: Iterable[bytes] = ()):
        self.width = width
        self._heights: list[int] = [wrap_height(line, width) for line in lines]
        self._prefix: list[int] = [0]

    def __len__(self) -> int:
        return len(self._heights)

    def __getitem__(self, row: int) -> int:
        return self._heights[row]

    @property
    def heights(self) -> tuple[int, ...]:
        return tuple(self._heights)

    @property
    def prefix(self) -> list[int]:
        """Prefix sums from the last ``rebuild_prefix_sums`` call."""
        return self._prefix

    def height_at(self, row: int) -> int:
        """Height of ``row``; the virtual line past the end takes one row."""
        if row == len(self._heights):
            return 1
        return self._heights[row]

    def recompute(self, row: int, line: bytes) -> int:
        height = wrap_height(line, self.width)
        self._heights[row] = height
        return height

    def insert_at(self, row: int, height: int) -> None:
        if row < 0 or row > len(self._heights):
            raise IndexError(f"insert_at: row {row} outside 0..{len(self._heights)}")
        try:
            self._heights.insert(row, height)
        except MemoryError as exc:
            raise ResourceExhaustion("Out of memory while growing the height cache") from exc

    def remove_at(self, row: int) -> None:
        del self._heights[row]

    def reflow(self, lines: Iterable[bytes], width: int) -> None:
        """Recompute every entry for a new viewport width."""
        self.width = width
        self._heights = [wrap_height(line, width) for line in lines]

    def rebuild_prefix_sums(self) -> list[int]:
        prefix = [0] * (len(self._heights) + 1)
        for i, height in enumerate(self._heights):
            prefix[i + 1] = prefix[i] + height
        self._prefix = prefix
        return prefix

    def span(self, start: int, end: int) -> int:
        """Total rows of lines ``start`` up to but excluding ``end``."""
        return sum(self._heights[start:end])
