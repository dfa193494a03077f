"""wrapedit - A line-oriented terminal text editor with soft wrapping."""

from .document import Document, visible_length
from .heights import VisualHeightCache, wrap_height
from .model import TextModel, CursorPosition
from .view import TerminalTextView, render_rows, render_blob

__all__ = [
    'Document',
    'visible_length',
    'VisualHeightCache',
    'wrap_height',
    'TextModel',
    'CursorPosition',
    'TerminalTextView',
    'render_rows',
    'render_blob',
]
