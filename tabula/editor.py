"""Main editor controller: one session owns the document, cursor and screen."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from .commands import CommandRegistry, QUIT_KEY
from .constants import EditorConstants
from .keyboard import KeyDecoder, KeyEvent, KeyType
from .model import Document
from .settings import EditorSettings
from .terminal import TerminalInterface
from .view import Compositor, StatusMessage, Viewport

logger = logging.getLogger(__name__)


class EditorError(Exception):
    """Unrecoverable editor failure, such as a file that cannot be opened."""


class EditorSession:
    """Main editor application controller."""

    def __init__(self, terminal: Optional[TerminalInterface] = None,
                 settings: Optional[EditorSettings] = None,
                 clock: Callable[[], float] = time.monotonic):
        """Initialize the editor components."""
        self.settings = settings or EditorSettings()
        self.terminal = terminal or TerminalInterface()
        self.keyboard = KeyDecoder(self.terminal, escape_timeout=self.settings.escape_timeout)
        self.compositor = Compositor(self.terminal.term)
        self.command_registry = CommandRegistry()
        self.document = Document(tab_stop=self.settings.tab_stop)
        self.viewport = Viewport(
            EditorConstants.DEFAULT_ROWS - EditorConstants.RESERVED_ROWS,
            EditorConstants.DEFAULT_COLS,
        )
        self.status_message = StatusMessage(self.settings.message_timeout, clock=clock)
        self.quit_times = self.settings.quit_times
        self.running = False

    # --- Main loop ---

    def run(self):
        """Run the main editor loop until the user quits."""
        self.terminal.setup()
        self.running = True
        try:
            rows, cols = self.terminal.get_window_size()
            self.viewport.resize(rows - EditorConstants.RESERVED_ROWS, cols)
            self.set_status_message(EditorConstants.HELP_MESSAGE)
            while self.running:
                self.refresh_screen()
                self.process_keypress(self.keyboard.read_key())
        finally:
            self.running = False
            self.terminal.cleanup()

    def refresh_screen(self):
        """Scroll the cursor into view and draw one frame."""
        self.viewport.scroll(self.document)
        frame = self.compositor.compose(self.document, self.viewport, self.status_message)
        self.terminal.write(frame)

    def process_keypress(self, key_event: KeyEvent) -> bool:
        """Dispatch one key. Returns True if the document was modified."""
        modified = self.command_registry.execute(self, key_event)
        if (key_event.key_type, key_event.value) != QUIT_KEY:
            self.quit_times = self.settings.quit_times
        return modified

    def set_status_message(self, text: str):
        self.status_message.set(text)

    def request_quit(self):
        """Quit, or count down the confirmations needed for a dirty document."""
        self.quit_times -= 1
        if self.document.dirty and self.quit_times > 0:
            self.set_status_message(EditorConstants.QUIT_WARNING_MESSAGE.format(self.quit_times))
            return
        logger.debug("Quit requested")
        self.running = False

    # --- Editing ---

    def insert_char(self, ch: str):
        cur = self.viewport.cursor
        if cur.cy == len(self.document):
            self.document.append_row("")
        self.document.insert_char(cur.cy, cur.cx, ch)
        cur.cx += 1

    def insert_newline(self):
        cur = self.viewport.cursor
        if cur.cx == 0:
            self.document.insert_row(cur.cy, "")
        else:
            self.document.split_at(cur.cy, cur.cx)
        cur.cy += 1
        cur.cx = 0

    def delete_char(self):
        """Delete the character left of the cursor, joining lines at column 0."""
        cur = self.viewport.cursor
        if cur.cy == len(self.document):
            return
        if cur.cx == 0 and cur.cy == 0:
            return
        if cur.cx > 0:
            self.document.delete_char(cur.cy, cur.cx - 1)
            cur.cx -= 1
        else:
            cur.cx = self.document.join_with_previous(cur.cy)
            cur.cy -= 1

    # --- Prompt ---

    def prompt(self, template: str) -> Optional[str]:
        """Read a line of input in the message bar.

        ``template`` is formatted with the text typed so far. Returns the
        text on Enter (empty input is ignored), or None on Escape.
        """
        buf = ""
        while True:
            self.set_status_message(template.format(buf))
            self.refresh_screen()
            key = self.keyboard.read_key()
            if (key.key_type == KeyType.SPECIAL and key.value in ('backspace', 'delete')) or \
               (key.key_type == KeyType.CTRL and key.value == 'h'):
                buf = buf[:-1]
            elif key.key_type == KeyType.SPECIAL and key.value == 'escape':
                self.set_status_message("")
                return None
            elif key.key_type == KeyType.SPECIAL and key.value == 'enter':
                if buf:
                    self.set_status_message("")
                    return buf
            elif key.key_type == KeyType.REGULAR and key.value.isprintable():
                buf += key.value

    # --- File I/O ---

    def load_file(self, filename: str):
        """Load a file into the editor.

        A file that does not exist yet starts an empty document with that
        name. Any other failure to read it is fatal.

        Args:
            filename: Path to file to load
        """
        try:
            with open(filename, 'rb') as f:
                data = f.read()
        except FileNotFoundError:
            logger.info(f"{filename} does not exist, starting a new file")
            self.document = Document(filename=filename, tab_stop=self.settings.tab_stop)
            return
        except OSError as e:
            raise EditorError(f"Cannot open {filename}: {e.strerror or e}") from e

        text = data.decode('utf-8', errors='surrogateescape')
        self.document = Document.from_text(text, filename=filename, tab_stop=self.settings.tab_stop)
        self.viewport.cursor.cx = self.viewport.cursor.cy = 0
        logger.info(f"Loaded {len(self.document)} lines from {filename}")

    def save_file(self, filename: str) -> bool:
        """Write the document to ``filename``, truncating any existing file.

        Returns:
            True if save succeeded, False otherwise
        """
        data = self.document.to_serialized_form().encode('utf-8', errors='surrogateescape')
        try:
            with open(filename, 'wb') as f:
                f.write(data)
        except OSError as e:
            logger.warning(f"Saving {filename} failed: {e}")
            self.set_status_message(EditorConstants.SAVE_ERROR_MESSAGE.format(e.strerror or e))
            return False

        self.document.filename = filename
        self.document.mark_clean()
        self.set_status_message(EditorConstants.SAVED_MESSAGE.format(len(data)))
        logger.info(f"Wrote {len(data)} bytes to {filename}")
        return True

    def save(self) -> bool:
        """Handle Ctrl-S: prompt for a name if needed, then save."""
        if self.document.filename is None:
            filename = self.prompt(EditorConstants.SAVE_PROMPT)
            if filename is None:
                self.set_status_message(EditorConstants.SAVE_ABORTED_MESSAGE)
                return False
            self.document.filename = filename
        return self.save_file(self.document.filename)
