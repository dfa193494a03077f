"""Terminal interface using Blessed for display and Curtsies for input."""

import logging
import blessed
from typing import Optional
import sys
import select

from curtsies.events import PasteEvent

from .constants import EditorConstants

logger = logging.getLogger(__name__)


# One screen cell per control byte, matching the byte-column wrap math;
# a tab paints as a space.
CONTROL_CELLS = {code: '?' for code in range(32)}
CONTROL_CELLS[0x09] = ' '
CONTROL_CELLS[0x7f] = '?'


def decode_row(row: bytes) -> str:
    """Text for one document row; undecodable bytes show as U+FFFD."""
    return row.decode('utf-8', errors='replace').translate(CONTROL_CELLS)


class TerminalInterface:
    """Handles terminal I/O using Blessed."""

    def __init__(self, terminal: Optional[blessed.Terminal] = None,
                 status_rows: int = EditorConstants.STATUS_ROWS):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()
        self.status_rows = status_rows
        self.is_fullscreen = False
        self._curtsies_input: Optional[object] = None
        self._curtsies_active: bool = False
        # Keys from a paste event not yet handed out
        self._pending_keys: list[str] = []
        # Virtual screen state for minimal updates
        self._last_rows: list[str] | None = None
        self._last_status: str | None = None

    def _write(self, text: str, flush: bool = False):
        print(text, end='', flush=flush)

    def setup(self):
        """Enter the alternate screen, enable mouse reporting and raw input."""
        self._write(self.term.enter_fullscreen)
        self._write(EditorConstants.MOUSE_REPORTING_ON)
        self._write(self.term.home + self.term.clear, flush=True)
        self.is_fullscreen = True
        self.invalidate_frame()
        if self._curtsies_input is None:
            try:
                from curtsies import Input  # type: ignore
                # Enter raw mode immediately so reads work
                self._curtsies_input = Input(keynames='curtsies')  # type: ignore
                self._curtsies_input.__enter__()
                self._curtsies_active = True
            except Exception as e:
                # curtsies may fail to initialize without a real tty (CI,
                # pipes); the editor then runs without keyboard input.
                logger.warning("Keyboard input unavailable: %s", e)
                self._curtsies_input = None
                self._curtsies_active = False

    def cleanup(self):
        """Leave raw mode and the alternate screen. Safe to call twice."""
        if self._curtsies_input is not None:
            try:
                if self._curtsies_active:
                    self._curtsies_input.__exit__(None, None, None)  # type: ignore
            except Exception as e:
                # Teardown must go on to restore the screen
                logger.warning("Could not leave raw mode cleanly: %s", e)
            finally:
                self._curtsies_input = None
                self._curtsies_active = False
        if self.is_fullscreen:
            self._write(EditorConstants.MOUSE_REPORTING_OFF)
            self._write(self.term.normal_cursor)
            self._write(self.term.exit_fullscreen, flush=True)
            self.is_fullscreen = False

    def invalidate_frame(self) -> None:
        """Forget the last frame so the next update repaints everything."""
        self._last_rows = None
        self._last_status = None

    def update_frame(self, rows: list[bytes], cursor_y: int, cursor_x: int,
                     status: Optional[str] = None, status_cursor: bool = False) -> None:
        """Paint document rows and the status line, then place the cursor.

        Only rows that changed since the last frame are rewritten; the
        first frame and any change in row count clear the screen.

        Args:
            rows: Document rows from the render assembler
            cursor_y: 1-based cursor row
            cursor_x: 1-based cursor column
            status: Status line text (help text when None)
            status_cursor: Put the cursor at the end of the status text
        """
        height = self.height
        texts = [decode_row(row) for row in rows[:height]]
        texts += [""] * (height - len(texts))

        if self._last_rows is None or len(self._last_rows) != len(texts):
            self._write(self.term.home + self.term.clear)
            self._last_rows = [None] * len(texts)
            self._last_status = None

        for y, text in enumerate(texts):
            if text != self._last_rows[y]:
                self._write(self.term.move(y, 0) + text + self.term.clear_eol)
                self._last_rows[y] = text

        if self.status_rows > 0:
            if status is None:
                help_text = EditorConstants.HELP_TEXT
                status_text = help_text.rjust(max(0, self.term.width - 1))
            else:
                status_text = status
            if status_text != self._last_status:
                self._write(self.term.move(self.term.height - 1, 0) + status_text + self.term.clear_eol)
                self._last_status = status_text

        if status_cursor and status is not None:
            self._write(self.term.move(self.term.height - 1, len(status)) + self.term.normal_cursor, flush=True)
        else:
            self._write(self.term.move(cursor_y - 1, cursor_x - 1) + self.term.normal_cursor, flush=True)

    def get_key(self, timeout=None):
        """Get a single key token from the user.

        A burst of input that curtsies reports as one paste event is queued
        and handed out one key per call.

        Args:
            timeout: Timeout in seconds (None for blocking, 0 for non-blocking)

        Returns:
            The curtsies key name as a string, or None on timeout or when
            keyboard input is unavailable.
        """
        if self._pending_keys:
            return self._pending_keys.pop(0)
        if self._curtsies_input is None:
            return None
        if timeout is not None:
            t = 0.0 if timeout == 0 else float(timeout)
            r, _, _ = select.select([sys.stdin], [], [], t)
            if not r:
                return None
        evt = next(self._curtsies_input)  # blocks when timeout is None
        if isinstance(evt, PasteEvent):
            self._pending_keys.extend(str(key) for key in evt.events)
            logger.debug("Paste event with %d key(s)", len(evt.events))
            return self._pending_keys.pop(0) if self._pending_keys else None
        return str(evt)

    def has_pending_input(self) -> bool:
        """True if keys from a paste are still queued (stdin may be idle)."""
        return bool(self._pending_keys)

    def flush_input(self) -> int:
        """Discard any input that is already queued. Returns tokens dropped."""
        dropped = 0
        while self.get_key(timeout=0) is not None:
            dropped += 1
        if dropped:
            logger.debug("Discarded %d queued key(s)", dropped)
        return dropped

    @property
    def width(self):
        """Terminal width in columns."""
        return self.term.width or EditorConstants.DEFAULT_WIDTH

    @property
    def height(self):
        """Rows available for document text (status rows excluded)."""
        rows = self.term.height or EditorConstants.DEFAULT_HEIGHT
        return max(1, rows - self.status_rows)
