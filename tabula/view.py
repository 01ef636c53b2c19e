from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

from .constants import EditorConstants
from .model import Document
from .version import get_version_string


@dataclass
class CursorPosition:
    cx: int = 0  # Character column within the row
    cy: int = 0  # Row index; len(document) is the virtual row past the end
    rx: int = 0  # Rendered column derived from cx


class Viewport:
    """Cursor plus the visible window into the document.

    ``rows`` and ``cols`` describe the text area only (status and message
    bars excluded). After ``scroll()`` the cursor is inside the window.
    """

    def __init__(self, rows: int, cols: int, allow_past_end: bool = True):
        self.rows = rows
        self.cols = cols
        self.row_offset = 0
        self.col_offset = 0
        self.cursor = CursorPosition()
        # Whether the cursor may rest on the virtual row after the last line
        self.allow_past_end = allow_past_end

    @property
    def cx(self) -> int:
        return self.cursor.cx

    @property
    def cy(self) -> int:
        return self.cursor.cy

    @property
    def rx(self) -> int:
        return self.cursor.rx

    def resize(self, rows: int, cols: int) -> None:
        self.rows = rows
        self.cols = cols

    def last_row(self, document: Document) -> int:
        """Largest row index the cursor may rest on."""
        if self.allow_past_end:
            return len(document)
        return max(0, len(document) - 1)

    def clamp_cx(self, document: Document) -> None:
        rowlen = document.row_length(self.cursor.cy)
        if self.cursor.cx > rowlen:
            self.cursor.cx = rowlen

    def move_cursor(self, direction: str, document: Document) -> None:
        """Move one step 'left', 'right', 'up' or 'down'."""
        cur = self.cursor
        on_row = cur.cy < len(document)
        if direction == 'left':
            if cur.cx > 0:
                cur.cx -= 1
            elif cur.cy > 0:
                cur.cy -= 1
                cur.cx = document.row_length(cur.cy)
        elif direction == 'right':
            if on_row:
                rowlen = document.row_length(cur.cy)
                if cur.cx < rowlen:
                    cur.cx += 1
                elif cur.cx == rowlen and cur.cy < self.last_row(document):
                    cur.cy += 1
                    cur.cx = 0
        elif direction == 'up':
            if cur.cy > 0:
                cur.cy -= 1
        elif direction == 'down':
            if cur.cy < self.last_row(document):
                cur.cy += 1
        self.clamp_cx(document)

    def home(self) -> None:
        self.cursor.cx = 0

    def end(self, document: Document) -> None:
        if self.cursor.cy < len(document):
            self.cursor.cx = document.row_length(self.cursor.cy)

    def page_up(self, document: Document) -> None:
        self.cursor.cy = min(self.row_offset, self.last_row(document))
        self.clamp_cx(document)
        for _ in range(self.rows):
            self.move_cursor('up', document)

    def page_down(self, document: Document) -> None:
        bottom = self.row_offset + self.rows - 1
        self.cursor.cy = max(0, min(bottom, self.last_row(document)))
        self.clamp_cx(document)
        for _ in range(self.rows):
            self.move_cursor('down', document)

    def scroll(self, document: Document) -> None:
        """Recompute ``rx`` and shift the offsets so the cursor is visible."""
        cur = self.cursor
        cur.rx = 0
        if cur.cy < len(document):
            cur.rx = document[cur.cy].cx_to_rx(cur.cx)

        if cur.cy < self.row_offset:
            self.row_offset = cur.cy
        if cur.cy >= self.row_offset + self.rows:
            self.row_offset = cur.cy - self.rows + 1

        if cur.rx < self.col_offset:
            self.col_offset = cur.rx
        if cur.rx >= self.col_offset + self.cols:
            self.col_offset = cur.rx - self.cols + 1


class StatusMessage:
    """Transient message shown in the message bar."""

    def __init__(self, timeout: float = EditorConstants.MESSAGE_TIMEOUT,
                 clock: Callable[[], float] = time.monotonic):
        self.text = ""
        self.set_at: Optional[float] = None
        self.timeout = timeout
        self.clock = clock

    def set(self, text: str) -> None:
        self.text = text
        self.set_at = self.clock()

    def visible_text(self) -> str:
        """The message, or '' once it has been up for ``timeout`` seconds."""
        if not self.text or self.set_at is None:
            return ""
        if self.clock() - self.set_at >= self.timeout:
            return ""
        return self.text


class Compositor:
    """Builds one full-screen frame of escape sequences per refresh.

    The frame is accumulated in a list and joined once, so the caller can
    hand the terminal the whole redraw in a single write.
    """

    def __init__(self, term):
        self.term = term

    def welcome_line(self, cols: int) -> str:
        welcome = EditorConstants.WELCOME_MESSAGE.format(get_version_string())
        welcome = welcome[:cols]
        padding = (cols - len(welcome)) // 2
        if padding:
            return EditorConstants.EMPTY_ROW_GLYPH + " " * (padding - 1) + welcome
        return welcome

    def draw_rows(self, out: list[str], document: Document, viewport: Viewport) -> None:
        term = self.term
        show_welcome = len(document) == 0 and viewport.row_offset == 0
        for y in range(viewport.rows):
            filerow = y + viewport.row_offset
            if filerow >= len(document):
                if show_welcome and y == viewport.rows // 3:
                    out.append(self.welcome_line(viewport.cols))
                else:
                    out.append(EditorConstants.EMPTY_ROW_GLYPH)
            else:
                render = document[filerow].render
                out.append(render[viewport.col_offset:viewport.col_offset + viewport.cols])
            out.append(term.clear_eol)
            out.append("\r\n")

    def status_bar(self, document: Document, viewport: Viewport) -> str:
        """Status bar text padded to exactly ``viewport.cols`` cells."""
        cols = viewport.cols
        name = document.filename or EditorConstants.NO_NAME
        name = name[:EditorConstants.FILENAME_DISPLAY_WIDTH]
        modified = " (modified)" if document.dirty else ""
        left = f"{name} - {len(document)} lines{modified}"[:cols]
        right = f"{viewport.cy + 1}/{len(document)}"
        if cols - len(left) >= len(right):
            return left + right.rjust(cols - len(left))
        return left.ljust(cols)

    def draw_status_bar(self, out: list[str], document: Document, viewport: Viewport) -> None:
        out.append(self.term.reverse)
        out.append(self.status_bar(document, viewport))
        out.append(self.term.normal)
        out.append("\r\n")

    def draw_message_bar(self, out: list[str], viewport: Viewport,
                         message: Optional[StatusMessage]) -> None:
        out.append(self.term.clear_eol)
        if message is not None:
            out.append(message.visible_text()[:viewport.cols])

    def compose(self, document: Document, viewport: Viewport,
                message: Optional[StatusMessage] = None) -> str:
        """Return the full frame for the current state.

        The caller is expected to have run ``viewport.scroll()`` first.
        """
        term = self.term
        out: list[str] = [term.hide_cursor, term.home]
        self.draw_rows(out, document, viewport)
        self.draw_status_bar(out, document, viewport)
        self.draw_message_bar(out, viewport, message)
        out.append(term.move_yx(viewport.cy - viewport.row_offset,
                                viewport.rx - viewport.col_offset))
        out.append(term.normal_cursor)
        return "".join(out)
