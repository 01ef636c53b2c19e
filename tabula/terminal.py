"""Terminal interface using Blessed for display, raw mode and sizing."""

from __future__ import annotations

import logging
import os
import select
import sys
from contextlib import ExitStack
from typing import Optional

import blessed

from .constants import EditorConstants

logger = logging.getLogger(__name__)


class TerminalError(Exception):
    """Unrecoverable failure talking to the terminal."""


class TerminalInterface:
    """Handles terminal I/O using Blessed.

    ``setup()`` enters the alternate screen and raw mode; ``cleanup()``
    restores the original terminal state. The editor calls ``cleanup()``
    from a ``finally`` block so every exit path restores the terminal.
    """

    def __init__(self, terminal: Optional[blessed.Terminal] = None):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()
        self._modes: Optional[ExitStack] = None

    def setup(self) -> None:
        """Enter fullscreen raw mode."""
        stack = ExitStack()
        try:
            stack.enter_context(self.term.fullscreen())
            stack.enter_context(self.term.raw())
        except Exception:
            stack.close()
            raise
        self._modes = stack

    def cleanup(self) -> None:
        """Leave raw mode and the alternate screen."""
        if self._modes is not None:
            try:
                self.write(self.term.clear + self.term.home + self.term.normal_cursor)
            finally:
                modes, self._modes = self._modes, None
                modes.close()

    # --- Input ---

    def _input_fd(self) -> int:
        return sys.stdin.fileno()

    def read_byte(self, timeout: Optional[float]) -> Optional[int]:
        """Read one byte from the keyboard.

        Returns None if no byte arrives within ``timeout`` seconds
        (``None`` blocks indefinitely).
        """
        fd = self._input_fd()
        ready, _, _ = select.select([fd], [], [], timeout)
        if not ready:
            return None
        try:
            data = os.read(fd, 1)
        except InterruptedError:
            return None
        if not data:
            return None
        return data[0]

    # --- Output ---

    def write(self, frame: str) -> None:
        """Write a complete frame and flush it in one go."""
        stream = self.term.stream
        buffer = getattr(stream, 'buffer', None)
        if buffer is not None:
            buffer.write(frame.encode('utf-8', errors='surrogateescape'))
            buffer.flush()
        else:
            stream.write(frame)
            stream.flush()

    # --- Geometry ---

    def get_window_size(self) -> tuple[int, int]:
        """Return ``(rows, cols)`` of the terminal.

        Uses the ioctl-backed size from Blessed; when that reports zero
        columns, moves the cursor to the bottom-right corner and asks the
        terminal where it ended up.
        """
        rows, cols = self.term.height, self.term.width
        if rows and cols:
            return rows, cols
        logger.debug("Window size unavailable, querying cursor position")
        self.write("\x1b[999C\x1b[999B")
        y, x = self.term.get_location(timeout=EditorConstants.CURSOR_QUERY_TIMEOUT)
        if y < 0 or x < 0:
            raise TerminalError("getWindowSize: terminal did not report its size")
        # get_location is 0-based
        return y + 1, x + 1
