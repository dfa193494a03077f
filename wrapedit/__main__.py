"""wrapedit CLI entry point.

Allows running via `python -m wrapedit` and provides the console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Mapping, Optional, Sequence

from .constants import EditorConstants
from .errors import EditorError
from .version import get_version_string

logger = logging.getLogger("wrapedit")


def configure_logging(environ: Optional[Mapping[str, str]] = None) -> None:
    """Send logs to ``WRAPEDIT_LOG_FILE`` if set; the screen is never used."""
    environ = os.environ if environ is None else environ
    prefix = EditorConstants.ENV_PREFIX
    log_file = environ.get(f"{prefix}LOG_FILE")
    if not log_file:
        logger.addHandler(logging.NullHandler())
        return
    level_name = environ.get(f"{prefix}LOG_LEVEL", "INFO").upper()
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level_name, logging.INFO))


def run_keyboard_test() -> None:
    """Print the KeyEvents produced for each keypress. Quit with ESC."""
    from .terminal import TerminalInterface
    from .keyboard import KeyboardHandler, KeyType

    print("Keyboard test mode: press keys to see parsed events.")
    print("Quit with ESC.")

    term = TerminalInterface(status_rows=0)
    kb = KeyboardHandler(term)
    term.setup()
    try:
        with term.term.raw():
            while True:
                ev = kb.get_key_event(timeout=None)
                if not ev:
                    continue
                if ev.key_type == KeyType.SPECIAL and ev.value == 'escape':
                    break
                raw = ev.raw.encode('unicode_escape').decode('ascii')
                print(f"type={ev.key_type.value} value={ev.value!r} raw='{raw}'", end='\r\n')
    finally:
        term.cleanup()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if args and args[0] in ("--version", "-V"):
        print(get_version_string())
        return 0
    if args and args[0] in ('--keytest', '--keyboard-test'):
        run_keyboard_test()
        return 0
    if len(args) != 1 or args[0].startswith('-'):
        print(EditorConstants.USAGE, file=sys.stderr)
        return 1

    configure_logging()

    # Lazy import to avoid importing UI deps for --version
    from .config import load_config
    from .editor import Editor

    editor = Editor(config=load_config())
    try:
        editor.load_file(args[0])
        editor.run()
    except EditorError as e:
        # Restore the terminal before reporting
        editor.cleanup()
        logger.error("Fatal: %s", e)
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
