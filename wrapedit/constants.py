"""Constants and configuration defaults for the wrapedit editor."""

class EditorConstants:
    """Central configuration constants for the editor."""

    # Screen layout
    STATUS_ROWS = 1  # Rows reserved at the bottom for the status line
    DEFAULT_WIDTH = 80  # Used when the terminal size is unknown
    DEFAULT_HEIGHT = 24

    # Input timing
    POLL_TIMEOUT = 0.1  # Longest wait for the next key event (seconds)
    ESCAPE_SEQUENCE_TIMEOUT = 0.01  # Wait for the rest of an escape sequence (seconds)

    # Line storage
    MAX_LINE_LENGTH = None  # No cap unless configured

    # Mouse reporting (X11 button events, SGR encoding)
    MOUSE_REPORTING_ON = "\x1b[?1000h\x1b[?1006h"
    MOUSE_REPORTING_OFF = "\x1b[?1000l\x1b[?1006l"

    # File operations
    ATOMIC_SAVE_PREFIX = "."  # Prefix for temporary save files
    ATOMIC_SAVE_SUFFIX = ".tmp"  # Suffix for temporary save files

    # Resize handling
    RESIZE_PIPE_MARKER = b'R'  # Byte written to pipe to signal resize

    # Environment overrides
    ENV_PREFIX = "WRAPEDIT_"

    # Status messages
    HELP_TEXT = "Ctrl-S save | Ctrl-Q quit"
    QUIT_PROMPT = " Save changes? (y, n) "
    USAGE = "usage: wrapedit FILE"
