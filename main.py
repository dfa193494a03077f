#!/usr/bin/env python3
"""wrapedit - A line-oriented terminal text editor.

Usage:
    python main.py FILE

Controls:
    Arrow keys: Move the cursor (up/down keep the column)
    Home/End, Ctrl-A/Ctrl-E: Start/end of line
    Enter: Split the line
    Backspace/Delete: Delete character, or join with the previous line
    Ctrl-S: Save file
    Ctrl-Q: Quit (asks to save if modified)
"""

import sys
from wrapedit.__main__ import main


if __name__ == "__main__":
    sys.exit(main())
