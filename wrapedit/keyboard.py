"""Keyboard input handling using curtsies-style tokens."""

import logging
from typing import Optional
from dataclasses import dataclass
from enum import Enum

from .constants import EditorConstants

logger = logging.getLogger(__name__)

MOUSE_REPORT_PREFIX = '\x1b[<'


class KeyType(Enum):
    """Types of key events."""
    REGULAR = "regular"
    ALT = "alt"
    CTRL = "ctrl"
    SPECIAL = "special"
    IGNORED = "ignored"  # Mouse reports and other consumed input


@dataclass
class KeyEvent:
    """Represents a parsed keyboard event."""
    key_type: KeyType
    value: str  # The base key (e.g., 'a', 'left', 'backspace')
    raw: str  # The raw key string from the terminal
    is_alt: bool = False
    is_ctrl: bool = False
    is_sequence: bool = False


class KeyboardHandler:
    """Turns terminal key tokens into KeyEvents.

    SGR mouse reports (``ESC [ < b ; x ; y M``) are swallowed. A report
    that arrives split over several tokens is consumed until its final
    ``M``/``m``; if the rest does not arrive within the escape timeout the
    partial report is dropped.
    """

    SPECIALS = {
        'left', 'right', 'up', 'down', 'home', 'end', 'enter', 'backspace',
        'delete', 'page_up', 'page_down', 'insert',
    }

    def __init__(self, terminal_interface):
        """Initialize with a terminal interface."""
        self.terminal = terminal_interface
        self._in_mouse_report = False

    def get_key_event(self, timeout: Optional[float] = None) -> Optional[KeyEvent]:
        """Get the next key event, or None if nothing arrived in time."""
        key = self.terminal.get_key(timeout)
        if not key:
            return None
        event = self.parse_key(key)
        while self._in_mouse_report:
            rest = self.terminal.get_key(EditorConstants.ESCAPE_SEQUENCE_TIMEOUT)
            if not rest:
                logger.debug("Dropping incomplete mouse report")
                self._in_mouse_report = False
                break
            event = self.parse_key(rest)
        return event

    def _ignored(self, key_str: str) -> KeyEvent:
        return KeyEvent(key_type=KeyType.IGNORED, value='', raw=key_str, is_sequence=True)

    def _continue_mouse_report(self, key_str: str) -> KeyEvent:
        if key_str.endswith(('M', 'm')):
            self._in_mouse_report = False
        return self._ignored(key_str)

    def parse_key(self, key) -> KeyEvent:
        """Parse a terminal key token into a KeyEvent.

        Args:
            key: curtsies key name (e.g. ``'<UP>'``) or raw character string

        Returns:
            Parsed KeyEvent
        """
        key_str = str(key)

        if self._in_mouse_report:
            return self._continue_mouse_report(key_str)

        if key_str.startswith(MOUSE_REPORT_PREFIX):
            self._in_mouse_report = True
            return self._continue_mouse_report(key_str)

        # Raw arrow sequences, in case the input layer passes them through
        if key_str in ('\x1b[A', '\x1bOA'):
            return KeyEvent(key_type=KeyType.SPECIAL, value='up', raw=key_str, is_sequence=True)
        if key_str in ('\x1b[B', '\x1bOB'):
            return KeyEvent(key_type=KeyType.SPECIAL, value='down', raw=key_str, is_sequence=True)
        if key_str in ('\x1b[C', '\x1bOC'):
            return KeyEvent(key_type=KeyType.SPECIAL, value='right', raw=key_str, is_sequence=True)
        if key_str in ('\x1b[D', '\x1bOD'):
            return KeyEvent(key_type=KeyType.SPECIAL, value='left', raw=key_str, is_sequence=True)

        # curtsies-style key names like '<LEFT>', '<Ctrl-x>', '<Esc+u>'
        if key_str.startswith('<') and key_str.endswith('>') and len(key_str) > 2:
            name = key_str[1:-1]
            lower = name.lower().replace('+', '-')
            parts = lower.split('-') if '-' in lower else [lower]
            mods = set(parts[:-1])
            base = parts[-1]
            if 'meta' in mods or 'esc' in mods:
                mods.add('alt')
            if base in ('pageup', 'page_up'):
                base = 'page_up'
            elif base in ('pagedown', 'page_down'):
                base = 'page_down'

            if base in ('space', 'spacebar', 'spc') and not mods:
                return KeyEvent(key_type=KeyType.REGULAR, value=' ', raw=' ')
            if base == 'tab' and not mods:
                return KeyEvent(key_type=KeyType.REGULAR, value='\t', raw='\t')
            if 'ctrl' in mods and len(base) == 1:
                # Ctrl-J / Ctrl-M are Enter, Ctrl-H is Backspace
                if base in ('j', 'm'):
                    return KeyEvent(key_type=KeyType.SPECIAL, value='enter', raw=key_str, is_sequence=True)
                if base == 'h':
                    return KeyEvent(key_type=KeyType.SPECIAL, value='backspace', raw=key_str, is_sequence=True)
                return KeyEvent(key_type=KeyType.CTRL, value=base, raw=key_str, is_ctrl=True)
            if 'alt' in mods:
                return KeyEvent(key_type=KeyType.ALT, value=base, raw=key_str, is_alt=True)
            if base in self.SPECIALS:
                return KeyEvent(key_type=KeyType.SPECIAL, value=base, raw=key_str, is_sequence=True)
            if base in ('esc', 'escape'):
                return KeyEvent(key_type=KeyType.SPECIAL, value='escape', raw='\x1b')
            return KeyEvent(key_type=KeyType.SPECIAL, value=base, raw=key_str, is_sequence=True)

        if len(key_str) == 1:
            o = ord(key_str)
            if o in (0x0a, 0x0d):
                return KeyEvent(key_type=KeyType.SPECIAL, value='enter', raw=key_str)
            if o in (0x08, 0x7f):
                return KeyEvent(key_type=KeyType.SPECIAL, value='backspace', raw=key_str)
            if o == 0x09:
                return KeyEvent(key_type=KeyType.REGULAR, value='\t', raw=key_str)
            if 1 <= o <= 26:  # Ctrl-A .. Ctrl-Z
                ch = chr(ord('a') + o - 1)
                return KeyEvent(key_type=KeyType.CTRL, value=ch, raw=key_str, is_ctrl=True)
            if o == 0x1b:
                return KeyEvent(key_type=KeyType.SPECIAL, value='escape', raw=key_str)
            if o < 32:
                return self._ignored(key_str)

        # Any other escape sequence is consumed without effect
        if key_str.startswith('\x1b'):
            return self._ignored(key_str)

        return KeyEvent(key_type=KeyType.REGULAR, value=key_str, raw=key_str)
