"""Main editor controller."""

import atexit
import logging
import os
import select
import signal
from typing import Optional

from .commands import CommandRegistry
from .config import EditorConfig
from .constants import EditorConstants
from .errors import EditorIOError
from .fileio import read_document, write_document
from .keyboard import KeyboardHandler, KeyEvent, KeyType
from .model import TextModel
from .terminal import TerminalInterface
from .view import TerminalTextView

logger = logging.getLogger(__name__)


class Editor:
    """Owns the document, the view and the terminal for one session.

    One cycle of ``run`` is: wait for a key (bounded by the poll timeout),
    apply the command, recompute scroll and cursor, repaint. ``cleanup``
    restores the terminal; it runs when ``run`` exits for any reason and is
    also registered with ``atexit`` while the terminal is in raw mode.
    """

    def __init__(self, config: Optional[EditorConfig] = None,
                 terminal: Optional[TerminalInterface] = None):
        """Initialize the editor components."""
        self.config = config or EditorConfig()
        self.terminal = terminal or TerminalInterface(status_rows=self.config.status_rows)
        self.keyboard = KeyboardHandler(self.terminal)
        self.view = TerminalTextView(self.terminal.width, self.terminal.height)
        self.model = TextModel(width=self.view.num_columns,
                               max_line_length=self.config.max_line_length)
        self.command_registry = CommandRegistry()  # Command pattern for key handling
        self.running = False
        # Create pipe for resize signaling
        self._resize_pipe_r, self._resize_pipe_w = os.pipe()
        self._cleaned_up = False
        # File handling
        self.filename: Optional[str] = None
        self._saved_version = self.model.document.version
        self.status_message: Optional[str] = None
        self.prompt_mode: Optional[str] = None  # None or 'quit_confirm'

    @property
    def modified(self) -> bool:
        """True if the document changed since it was loaded or saved."""
        return self.model.document.version != self._saved_version

    def _handle_resize(self, signum, frame):
        """Handle terminal resize signal."""
        del signum, frame  # Unused
        # Write to pipe to wake up select()
        os.write(self._resize_pipe_w, EditorConstants.RESIZE_PIPE_MARKER)

    def _apply_terminal_size(self):
        """Take the current terminal size for the viewport and height cache."""
        width, height = self.terminal.width, self.terminal.height
        self.view.resize(width, height)
        self.model.set_width(width)

    def run(self):
        """Run the main editor loop."""
        self.terminal.setup()
        atexit.register(self.cleanup)
        self.running = True

        original_winch_handler = signal.signal(signal.SIGWINCH, self._handle_resize)
        try:
            with self.terminal.term.raw():
                self._apply_terminal_size()
                need_draw = True

                while self.running:
                    if need_draw:
                        self._draw()
                        need_draw = False

                    if self.terminal.has_pending_input():
                        # Rest of a paste; stdin itself may be idle
                        ready = [0]
                    else:
                        # Wait for input on stdin or resize pipe
                        ready, _, _ = select.select([0, self._resize_pipe_r], [], [],
                                                    self.config.poll_timeout)

                    if self._resize_pipe_r in ready:
                        # Clear the pipe
                        os.read(self._resize_pipe_r, 1024)
                        self._apply_terminal_size()
                        self.terminal.invalidate_frame()
                        need_draw = True
                    elif 0 in ready:
                        key_event = self.keyboard.get_key_event(timeout=0)
                        if key_event:
                            self._handle_key_event(key_event)
                            need_draw = True
        finally:
            signal.signal(signal.SIGWINCH, original_winch_handler)
            self.cleanup()

    def cleanup(self):
        """Restore the terminal and release the resize pipe. Idempotent."""
        if self._cleaned_up:
            return
        self._cleaned_up = True
        try:
            self.terminal.cleanup()
        finally:
            for fd in (self._resize_pipe_r, self._resize_pipe_w):
                try:
                    os.close(fd)
                except OSError:
                    pass
            atexit.unregister(self.cleanup)

    def _draw(self):
        """Draw the current editor state to terminal."""
        rows = self.view.render(self.model)

        status_override = None
        if self.prompt_mode == 'quit_confirm':
            status_override = EditorConstants.QUIT_PROMPT
        elif self.status_message:
            status_override = f" {self.status_message}"

        self.terminal.update_frame(
            rows,
            self.view.cursor_y,
            self.view.cursor_x,
            status=status_override,
            status_cursor=self.prompt_mode is not None,
        )

    def _handle_key_event(self, key_event: KeyEvent):
        """Handle a keyboard event.

        Args:
            key_event: KeyEvent object with parsed key information
        """
        # Clear status message on any keypress (except in prompt mode)
        if self.status_message and not self.prompt_mode:
            self.status_message = None

        if self.prompt_mode == 'quit_confirm':
            self._handle_quit_confirm(key_event)
            return

        if key_event.key_type == KeyType.IGNORED:
            return
        # A lone ESC is a complete keypress that does nothing
        if key_event.key_type == KeyType.SPECIAL and key_event.value == 'escape':
            return

        self.command_registry.execute(self, key_event)

    def _handle_quit_confirm(self, key_event: KeyEvent):
        """Handle keypress during quit confirmation.

        ``y`` saves and quits; a failed save here is fatal. ``n`` quits
        without saving. Anything else cancels and drops queued input.
        """
        char = key_event.value.lower() if key_event.key_type == KeyType.REGULAR else ''
        if char == 'y':
            self.save_file(self.filename)
            self.running = False
        elif char == 'n':
            self.running = False
        else:
            self.prompt_mode = None
            self.terminal.flush_input()
            self.status_message = "Quit cancelled"

    def load_file(self, filename: str):
        """Load a file into the editor.

        A missing file starts an empty document that is created on save.

        Raises:
            EditorIOError: The file exists but cannot be read.
            LineLengthExceeded: A line is longer than the configured limit.
        """
        self.filename = filename
        content = read_document(filename)
        self.model = TextModel(width=self.view.num_columns,
                               max_line_length=self.config.max_line_length)
        if content:
            self.model.load_bytes(content)
        self._saved_version = self.model.document.version

    def save_file(self, filename: str):
        """Save the document to ``filename``.

        Raises:
            EditorIOError: The file could not be written completely.
        """
        self.model.commit()
        write_document(filename, self.model.document)
        self.filename = filename
        self._saved_version = self.model.document.version

    def _handle_save(self):
        """Handle Ctrl-S save command."""
        if not self.filename:
            self.status_message = "No file name"
            return
        try:
            self.save_file(self.filename)
        except EditorIOError as e:
            self.status_message = f"Error: {e}"
        else:
            self.status_message = f"Saved to {self.filename}"
