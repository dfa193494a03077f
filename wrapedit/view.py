"""Viewport scrolling and the render assembler.

The editor paints the list from ``render_rows`` through
``TerminalInterface.update_frame``, which diffs rows against the previous
frame. ``render_blob`` joins the same rows with ``\\r\\n`` into one byte
string; rows, not the blob, are what the editor paints at runtime.
"""

from typing import Sequence

from .document import visible_length
from .heights import VisualHeightCache
from .model import TextModel

ROW_BREAK = b"\r\n"


def wrap_rows(line: bytes, width: int) -> list[bytes]:
    """Cut the visible part of ``line`` into rows of ``width`` bytes.

    An empty line is one empty row. Width 0 keeps the line on one row.
    """
    content = line[:visible_length(line)]
    if width <= 0 or len(content) <= width:
        return [bytes(content)]
    return [bytes(content[i:i + width]) for i in range(0, len(content), width)]


def render_rows(lines: Sequence[bytes], first_visible: int, width: int, num_rows: int) -> list[bytes]:
    """Rows to paint, starting at ``first_visible``.

    Stops as soon as ``num_rows`` rows are produced, even in the middle of
    a wrapped line.
    """
    rows: list[bytes] = []
    for index in range(first_visible, len(lines)):
        for row in wrap_rows(lines[index], width):
            if len(rows) >= num_rows:
                return rows
            rows.append(row)
    return rows


def render_blob(lines: Sequence[bytes], first_visible: int, width: int, num_rows: int) -> bytes:
    """The document area as one blob, rows separated by ``\\r\\n``."""
    return ROW_BREAK.join(render_rows(lines, first_visible, width, num_rows))


class TerminalTextView:
    """Scroll offset and screen cursor for a width x height viewport.

    ``first_visible`` is the topmost rendered logical line. It only moves
    in ``calculate_scroll``, one logical line at a time, so the cursor's
    whole wrapped line stays on screen whenever it fits.
    """

    num_rows: int
    num_columns: int
    first_visible: int = 0
    # 1-based terminal coordinates of the cursor
    cursor_y: int = 1
    cursor_x: int = 1

    def __init__(self, num_columns: int = 80, num_rows: int = 24):
        self.num_columns = num_columns
        self.num_rows = num_rows
        self.first_visible = 0
        self.cursor_y = 1
        self.cursor_x = 1
        self.rows: list[bytes] = []

    def resize(self, num_columns: int, num_rows: int):
        self.num_columns = num_columns
        self.num_rows = num_rows

    def calculate_scroll(self, heights: VisualHeightCache, cursor_row: int) -> int:
        prefix = heights.rebuild_prefix_sums()
        first = min(self.first_visible, len(heights))
        line_height = heights.height_at(cursor_row)
        line_end = prefix[cursor_row] + line_height

        # Scroll down until the cursor line fits below first
        while line_end - prefix[first] > self.num_rows and first < cursor_row:
            first += 1

        # Scroll up until the whole cursor line is below first
        while line_end - prefix[first] < line_height and first > 0:
            first -= 1

        self.first_visible = first
        return first

    def translate_cursor(self, heights: VisualHeightCache, cursor_row: int, cursor_col: int) -> tuple[int, int]:
        """Map a logical position to 1-based (row, column) on screen."""
        y = heights.span(self.first_visible, cursor_row)
        if self.num_columns > 0:
            y += cursor_col // self.num_columns + 1
            x = cursor_col % self.num_columns + 1
        else:
            y += 1
            x = cursor_col + 1
        # A cursor just past a line that exactly fills the bottom row
        y = max(1, min(y, self.num_rows))
        self.cursor_y, self.cursor_x = y, x
        return y, x

    def render(self, model: TextModel) -> list[bytes]:
        """Recompute scroll and cursor for ``model`` and build the rows."""
        row = model.cursor_position.row
        self.calculate_scroll(model.heights, row)
        self.translate_cursor(model.heights, row, model.cursor_position.column)
        self.rows = render_rows(model.document.lines, self.first_visible, self.num_columns, self.num_rows)
        return self.rows
