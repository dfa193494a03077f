"""Edit operations over the document and its height cache.

``TextModel`` owns the cursor and the staging line, the working copy of
the line under the cursor. Every operation that adds or removes a document
line adds or removes the matching height cache entry in the same step, so
``len(heights) == len(document)`` holds between operations.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .document import CRLF, Document, strip_terminator, terminator_length, visible_length
from .errors import LineLengthExceeded, ResourceExhaustion
from .heights import VisualHeightCache, wrap_height

logger = logging.getLogger(__name__)

LF = 0x0A
CR = 0x0D


@dataclass
class CursorPosition:
    row: int = 0
    column: int = 0


class TextModel:
    document: Document
    heights: VisualHeightCache
    cursor_position: CursorPosition
    staging: bytearray
    wanted_column: int

    def __init__(self, document: Optional[Document] = None, width: int = 80,
                 max_line_length: Optional[int] = None):
        self.document = document if document is not None else Document()
        self.heights = VisualHeightCache(width, self.document)
        self.cursor_position = CursorPosition()
        self.max_line_length = max_line_length
        self.staging = bytearray()
        self.wanted_column = 0
        self._load_staging()

    @property
    def row(self) -> int:
        return self.cursor_position.row

    @property
    def column(self) -> int:
        return self.cursor_position.column

    @property
    def on_virtual_line(self) -> bool:
        return self.cursor_position.row == len(self.document)

    def staging_visible_length(self) -> int:
        return visible_length(self.staging)

    # --- Staging line bookkeeping ---

    def _load_staging(self):
        self.staging = bytearray(self.document.line(self.cursor_position.row))

    def commit(self):
        """Write the staging line back into the document.

        Nothing happens on the virtual line: it only becomes real on the
        first write.
        """
        row = self.cursor_position.row
        if row >= len(self.document):
            return
        self.document.commit_line(row, self.staging)
        self.heights.recompute(row, self.staging)

    def _promote_virtual_line(self):
        row = self.cursor_position.row
        if self.document.promote_virtual(row):
            self.heights.insert_at(row, 1)

    def _check_length(self, length: int):
        if self.max_line_length is not None and length > self.max_line_length:
            logger.error("Line %d grew to %d bytes (limit %d)",
                         self.cursor_position.row + 1, length, self.max_line_length)
            raise LineLengthExceeded(self.cursor_position.row, self.max_line_length)

    def _insert_bytes(self, data: bytes):
        self._check_length(visible_length(self.staging) + len(data))
        col = self.cursor_position.column
        try:
            self.staging[col:col] = data
        except MemoryError as exc:
            logger.error("Could not grow line %d by %d bytes", self.cursor_position.row + 1, len(data))
            raise ResourceExhaustion("Out of memory while growing a line") from exc
        # A trailing bare CR becomes the terminator, not a column
        self.cursor_position.column = min(col + len(data), visible_length(self.staging))

    # --- Loading ---

    def load_bytes(self, data: bytes):
        """Feed file contents through the insertion path, line by line.

        A ``\\n`` ends the current line with ``\\r\\n`` (a preceding ``\\r``
        is folded into that terminator). The cursor ends at the top of the
        document.
        """
        for byte in data:
            if byte == LF:
                self._promote_virtual_line()
                if self.staging.endswith(b"\r"):
                    del self.staging[-1]
                self.staging += CRLF
                self.commit()
                self.cursor_position.row += 1
                self.cursor_position.column = 0
                self.staging = bytearray()
            else:
                self._promote_virtual_line()
                # Loading always appends, even after a bare CR
                self.cursor_position.column = len(self.staging)
                self._insert_bytes(bytes((byte,)))
                self.heights.recompute(self.cursor_position.row, self.staging)
        self.commit()
        self.cursor_position = CursorPosition()
        self.wanted_column = 0
        self._load_staging()
        logger.debug("Loaded %d bytes into %d lines", len(data), len(self.document))

    # --- Insertion and deletion ---

    def insert_char(self, data: bytes):
        """Insert ``data`` at the cursor; only this row's height changes."""
        if not data:
            return
        self._promote_virtual_line()
        self._insert_bytes(data)
        self.commit()
        self.wanted_column = self.cursor_position.column

    def insert_newline(self):
        """Split the staging line at the cursor (Enter)."""
        self._promote_virtual_line()
        row = self.cursor_position.row
        col = self.cursor_position.column
        head = bytes(self.staging[:col]) + CRLF
        tail = bytes(self.staging[col:])

        self.document.commit_line(row, head)
        self.heights.recompute(row, head)
        self.document.insert_line_at(row + 1, tail)
        self.heights.insert_at(row + 1, wrap_height(tail, self.heights.width))

        self.cursor_position = CursorPosition(row + 1, 0)
        self.staging = bytearray(tail)
        self.wanted_column = 0

    def delete_backward(self):
        """Backspace: delete the byte left of the cursor or join lines."""
        row = self.cursor_position.row
        col = self.cursor_position.column
        if col > 0:
            del self.staging[col - 1]
            self.cursor_position.column = min(col - 1, visible_length(self.staging))
            self.commit()
        elif row > 0:
            self._join_with_previous_line()
        self.wanted_column = self.cursor_position.column

    def _join_with_previous_line(self):
        row = self.cursor_position.row
        current = bytes(self.staging)
        previous = strip_terminator(self.document[row - 1])
        joined = previous + current
        self._check_length(visible_length(joined))

        if row < len(self.document):
            self.document.remove_line_at(row)
            self.heights.remove_at(row)

        self.cursor_position = CursorPosition(row - 1, min(len(previous), visible_length(joined)))
        self.staging = bytearray(joined)
        self.commit()

    # --- Cursor movement ---

    def move_right(self):
        if self.cursor_position.column < visible_length(self.staging):
            self.cursor_position.column += 1
        elif self.cursor_position.row < len(self.document):
            self.commit()
            # Right at end of line is Down + Home
            self.wanted_column = 0
            self.move_down()
        self.wanted_column = self.cursor_position.column

    def move_left(self):
        if self.cursor_position.column > 0:
            self.cursor_position.column -= 1
        elif self.cursor_position.row > 0:
            self.commit()
            self.cursor_position.row -= 1
            self._load_staging()
            self.cursor_position.column = visible_length(self.staging)
        self.wanted_column = self.cursor_position.column

    def move_up(self):
        """Move one logical line up, keeping the wanted column."""
        if self.cursor_position.row == 0:
            return
        self.commit()
        self.cursor_position.row -= 1
        self._load_staging()
        self.cursor_position.column = min(self.wanted_column, visible_length(self.staging))

    def move_down(self):
        """Move one logical line down, keeping the wanted column.

        Leaving the last real line enters the virtual line; the last line
        gets a ``\\r\\n`` first if it has no terminator.
        """
        if self.cursor_position.row >= len(self.document):
            return
        if self.cursor_position.row == len(self.document) - 1:
            if terminator_length(self.staging) == 0:
                self.staging += CRLF
            self.commit()
            self.cursor_position.row += 1
            self.staging = bytearray()
            self.cursor_position.column = 0
            return
        self.commit()
        self.cursor_position.row += 1
        self._load_staging()
        self.cursor_position.column = min(self.wanted_column, visible_length(self.staging))

    def move_home(self):
        self.cursor_position.column = 0
        self.wanted_column = 0

    def move_end(self):
        self.cursor_position.column = visible_length(self.staging)
        self.wanted_column = self.cursor_position.column

    # --- Layout ---

    def set_width(self, width: int):
        """Reflow the height cache for a new viewport width."""
        self.commit()
        if width != self.heights.width:
            self.heights.reflow(self.document, width)
