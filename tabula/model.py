"""Row-oriented document model.

A document is an ordered list of rows. Each row keeps its authoritative
text in ``chars`` and a derived ``render`` string with tabs expanded to
spaces. Every mutation recomputes ``render`` before returning, so the two
never disagree once an operation completes.
"""

from __future__ import annotations

from typing import Iterator, Optional

from .constants import EditorConstants


class Row:
    """One logical line of the document plus its rendered form."""

    __slots__ = ("chars", "render", "tab_stop")

    def __init__(self, chars: str = "", tab_stop: int = EditorConstants.TAB_STOP):
        self.chars = chars
        self.render = ""
        self.tab_stop = tab_stop
        self.update()

    def __len__(self) -> int:
        return len(self.chars)

    def __repr__(self) -> str:
        return f"Row({self.chars!r})"

    def update(self) -> None:
        """Recompute ``render`` from ``chars``."""
        if "\t" not in self.chars:
            self.render = self.chars
            return
        out: list[str] = []
        width = 0
        for ch in self.chars:
            if ch == "\t":
                # At least one space, then pad to the next tab stop
                pad = self.tab_stop - (width % self.tab_stop)
                out.append(" " * pad)
                width += pad
            else:
                out.append(ch)
                width += 1
        self.render = "".join(out)

    def cx_to_rx(self, cx: int) -> int:
        """Map a character column to its on-screen column."""
        rx = 0
        for ch in self.chars[:cx]:
            if ch == "\t":
                rx += (self.tab_stop - 1) - (rx % self.tab_stop)
            rx += 1
        return rx


class Document:
    """Ordered sequence of rows with a dirty flag and optional filename.

    ``dirty`` counts mutations since the last load or save; treat it as a
    boolean.
    """

    def __init__(self, lines: Optional[list[str]] = None, filename: Optional[str] = None,
                 tab_stop: int = EditorConstants.TAB_STOP):
        self.tab_stop = tab_stop
        self.rows: list[Row] = [Row(line, tab_stop) for line in (lines or [])]
        self.filename = filename
        self.dirty = 0

    @classmethod
    def from_text(cls, text: str, filename: Optional[str] = None,
                  tab_stop: int = EditorConstants.TAB_STOP) -> "Document":
        """Build a document from serialized text, one row per line.

        Only ``\\n`` ends a line. Trailing ``\\n`` and ``\\r`` characters are
        stripped from each line; other control characters stay in the row.
        """
        if not text:
            return cls([], filename=filename, tab_stop=tab_stop)
        pieces = text.split("\n")
        if text.endswith("\n"):
            pieces.pop()
        lines = [piece.rstrip("\r\n") for piece in pieces]
        return cls(lines, filename=filename, tab_stop=tab_stop)

    def __len__(self) -> int:
        return len(self.rows)

    def __getitem__(self, index: int) -> Row:
        return self.rows[index]

    def __iter__(self) -> Iterator[Row]:
        return iter(self.rows)

    @property
    def lines(self) -> list[str]:
        return [row.chars for row in self.rows]

    def row_length(self, index: int) -> int:
        """Length of row ``index``; the virtual row past the end has length 0."""
        if 0 <= index < len(self.rows):
            return len(self.rows[index])
        return 0

    def _row(self, index: int) -> Optional[Row]:
        if 0 <= index < len(self.rows):
            return self.rows[index]
        return None

    # --- Row operations ---

    def insert_row(self, at: int, text: str) -> None:
        if at < 0 or at > len(self.rows):
            return
        self.rows.insert(at, Row(text, self.tab_stop))
        self.dirty += 1

    def append_row(self, text: str) -> None:
        self.insert_row(len(self.rows), text)

    def delete_row(self, at: int) -> None:
        if at < 0 or at >= len(self.rows):
            return
        del self.rows[at]
        self.dirty += 1

    def insert_char(self, row: int, at: int, ch: str) -> None:
        r = self._row(row)
        if r is None:
            return
        if at < 0 or at > len(r.chars):
            at = len(r.chars)
        r.chars = r.chars[:at] + ch + r.chars[at:]
        r.update()
        self.dirty += 1

    def delete_char(self, row: int, at: int) -> None:
        r = self._row(row)
        if r is None or at < 0 or at >= len(r.chars):
            return
        r.chars = r.chars[:at] + r.chars[at + 1:]
        r.update()
        self.dirty += 1

    def append_text(self, row: int, text: str) -> None:
        r = self._row(row)
        if r is None:
            return
        r.chars += text
        r.update()
        self.dirty += 1

    def split_at(self, row: int, col: int) -> None:
        """Move ``chars[col:]`` of ``row`` onto a new row right after it."""
        r = self._row(row)
        if r is None:
            return
        col = max(0, min(col, len(r.chars)))
        self.insert_row(row + 1, r.chars[col:])
        r.chars = r.chars[:col]
        r.update()

    def join_with_previous(self, row: int) -> int:
        """Append ``row`` onto the row above it and remove ``row``.

        Returns the previous row's length before the join, which is where
        the cursor belongs afterwards.
        """
        if row <= 0 or row >= len(self.rows):
            return 0
        prev = self.rows[row - 1]
        join_point = len(prev.chars)
        self.append_text(row - 1, self.rows[row].chars)
        self.delete_row(row)
        return join_point

    # --- Persistence ---

    def to_serialized_form(self) -> str:
        """Every row followed by a newline, including the last."""
        return "".join(row.chars + "\n" for row in self.rows)

    def mark_clean(self) -> None:
        self.dirty = 0
