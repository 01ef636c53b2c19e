"""Tabula - a small terminal text editor."""

from .model import Document, Row
from .view import Compositor, CursorPosition, Viewport
from .editor import EditorSession

__all__ = [
    'Document',
    'Row',
    'Compositor',
    'CursorPosition',
    'Viewport',
    'EditorSession',
]
