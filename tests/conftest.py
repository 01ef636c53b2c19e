import io

import blessed
import pytest

from tabula.editor import EditorSession
from tabula.settings import EditorSettings
from tabula.terminal import TerminalInterface


def make_blessed_terminal() -> blessed.Terminal:
    return blessed.Terminal(kind='xterm-256color', force_styling=True, stream=io.StringIO())


class FakeTerminal(TerminalInterface):
    """Terminal that replays queued input bytes and records written frames."""

    def __init__(self, rows: int = 24, cols: int = 80):
        super().__init__(make_blessed_terminal())
        self.rows = rows
        self.cols = cols
        self.input = bytearray()
        self.frames: list[str] = []
        self.setup_calls = 0
        self.cleanup_calls = 0
        self._idle_reads = 0

    def feed(self, data: bytes) -> None:
        self.input.extend(data)

    def setup(self) -> None:
        self.setup_calls += 1

    def cleanup(self) -> None:
        self.cleanup_calls += 1

    def read_byte(self, timeout):
        if self.input:
            self._idle_reads = 0
            return self.input.pop(0)
        self._idle_reads += 1
        if self._idle_reads > 1000:
            raise EOFError("test input exhausted")
        return None

    def write(self, frame: str) -> None:
        self.frames.append(frame)

    def get_window_size(self):
        return self.rows, self.cols


@pytest.fixture
def blessed_term():
    return make_blessed_terminal()


@pytest.fixture
def fake_terminal():
    return FakeTerminal()


@pytest.fixture
def editor(fake_terminal):
    """Editor session on a fake 24x80 terminal with fast escape timeouts."""
    return EditorSession(terminal=fake_terminal, settings=EditorSettings(escape_timeout=0.01))
