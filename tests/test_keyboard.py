"""Test keyboard input handling."""

import pytest
from wrapedit.keyboard import KeyboardHandler, KeyEvent, KeyType


class MockTerminal:
    """Mock terminal interface for testing."""

    def __init__(self):
        self._key_queue = []
        self.timeouts = []

    def get_key(self, timeout=None):
        """Mock get_key that returns from queue."""
        self.timeouts.append(timeout)
        if self._key_queue:
            return self._key_queue.pop(0)
        return None

    def add_key(self, key_str):
        """Add a key to the queue."""
        self._key_queue.append(key_str)


@pytest.fixture
def handler():
    return KeyboardHandler(MockTerminal())


@pytest.mark.parametrize("token,value", [
    ('<LEFT>', 'left'),
    ('<RIGHT>', 'right'),
    ('<UP>', 'up'),
    ('<DOWN>', 'down'),
    ('<HOME>', 'home'),
    ('<END>', 'end'),
    ('<BACKSPACE>', 'backspace'),
    ('<DELETE>', 'delete'),
    ('<PAGEUP>', 'page_up'),
])
def test_curtsies_special_keys(handler, token, value):
    event = handler.parse_key(token)
    assert event.key_type == KeyType.SPECIAL
    assert event.value == value


@pytest.mark.parametrize("token", ['<Ctrl-j>', '<Ctrl-m>', '\n', '\r'])
def test_enter_variants(handler, token):
    event = handler.parse_key(token)
    assert event.key_type == KeyType.SPECIAL
    assert event.value == 'enter'


@pytest.mark.parametrize("token", ['<Ctrl-h>', '\x08', '\x7f'])
def test_backspace_variants(handler, token):
    event = handler.parse_key(token)
    assert event.key_type == KeyType.SPECIAL
    assert event.value == 'backspace'


def test_ctrl_keys(handler):
    event = handler.parse_key('<Ctrl-q>')
    assert event.key_type == KeyType.CTRL
    assert event.value == 'q'
    assert event.is_ctrl

    event = handler.parse_key('\x13')  # raw Ctrl-S
    assert event.key_type == KeyType.CTRL
    assert event.value == 's'


def test_raw_arrow_sequences(handler):
    assert handler.parse_key('\x1b[A').value == 'up'
    assert handler.parse_key('\x1bOB').value == 'down'
    assert handler.parse_key('\x1b[C').value == 'right'
    assert handler.parse_key('\x1b[D').value == 'left'


def test_space_and_tab_are_text(handler):
    assert handler.parse_key('<SPACE>') == KeyEvent(key_type=KeyType.REGULAR, value=' ', raw=' ')
    assert handler.parse_key('<TAB>').value == '\t'
    assert handler.parse_key('\t').key_type == KeyType.REGULAR


def test_printable_and_utf8_text(handler):
    assert handler.parse_key('a') == KeyEvent(key_type=KeyType.REGULAR, value='a', raw='a')
    assert handler.parse_key('é').value == 'é'


def test_alt_keys(handler):
    event = handler.parse_key('<Esc+b>')
    assert event.key_type == KeyType.ALT
    assert event.value == 'b'


def test_lone_escape(handler):
    assert handler.parse_key('<ESC>').value == 'escape'
    assert handler.parse_key('\x1b').value == 'escape'


def test_other_control_bytes_ignored(handler):
    assert handler.parse_key('\x00').key_type == KeyType.IGNORED
    assert handler.parse_key('\x1c').key_type == KeyType.IGNORED


def test_unknown_escape_sequence_ignored(handler):
    assert handler.parse_key('\x1b[15~').key_type == KeyType.IGNORED


def test_complete_mouse_report_swallowed():
    terminal = MockTerminal()
    handler = KeyboardHandler(terminal)
    terminal.add_key('\x1b[<0;12;5M')
    terminal.add_key('a')

    event = handler.get_key_event()
    assert event.key_type == KeyType.IGNORED
    # The next key is unaffected
    assert handler.get_key_event().value == 'a'


def test_mouse_release_swallowed(handler):
    assert handler.parse_key('\x1b[<0;12;5m').key_type == KeyType.IGNORED
    assert handler.parse_key('x').key_type == KeyType.REGULAR


def test_split_mouse_report_swallowed():
    terminal = MockTerminal()
    handler = KeyboardHandler(terminal)
    for token in ['\x1b[<', '0', ';', '1', '2', ';', '5', 'M', 'z']:
        terminal.add_key(token)

    event = handler.get_key_event()
    assert event.key_type == KeyType.IGNORED
    event = handler.get_key_event()
    assert event.key_type == KeyType.REGULAR
    assert event.value == 'z'


def test_incomplete_mouse_report_dropped_after_timeout():
    terminal = MockTerminal()
    handler = KeyboardHandler(terminal)
    terminal.add_key('\x1b[<0;1')

    event = handler.get_key_event(timeout=0)
    assert event.key_type == KeyType.IGNORED
    assert not handler._in_mouse_report

    terminal.add_key('q')
    assert handler.get_key_event().value == 'q'


def test_no_key_returns_none(handler):
    assert handler.get_key_event(timeout=0) is None
