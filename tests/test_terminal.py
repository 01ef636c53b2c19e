"""Test terminal geometry and frame output."""

import io
from unittest.mock import PropertyMock, patch

import blessed
import pytest

from tabula.terminal import TerminalError, TerminalInterface


def make_terminal():
    return TerminalInterface(blessed.Terminal(kind='xterm-256color', force_styling=True,
                                              stream=io.StringIO()))


def test_window_size_from_terminal():
    terminal = make_terminal()
    with patch.object(type(terminal.term), 'height', PropertyMock(return_value=24)):
        with patch.object(type(terminal.term), 'width', PropertyMock(return_value=80)):
            assert terminal.get_window_size() == (24, 80)


def test_window_size_falls_back_to_cursor_query():
    terminal = make_terminal()
    with patch.object(type(terminal.term), 'height', PropertyMock(return_value=0)):
        with patch.object(type(terminal.term), 'width', PropertyMock(return_value=0)):
            with patch.object(terminal.term, 'get_location', return_value=(39, 119)):
                assert terminal.get_window_size() == (40, 120)
    assert "\x1b[999C\x1b[999B" in terminal.term.stream.getvalue()


def test_window_size_query_failure_is_fatal():
    terminal = make_terminal()
    with patch.object(type(terminal.term), 'height', PropertyMock(return_value=0)):
        with patch.object(type(terminal.term), 'width', PropertyMock(return_value=0)):
            with patch.object(terminal.term, 'get_location', return_value=(-1, -1)):
                with pytest.raises(TerminalError):
                    terminal.get_window_size()


def test_write_flushes_whole_frame():
    terminal = make_terminal()
    terminal.write("frame one")
    terminal.write("frame two")
    assert terminal.term.stream.getvalue() == "frame oneframe two"


def test_write_encodes_for_binary_streams():
    class Stream(io.StringIO):
        def __init__(self):
            super().__init__()
            self.buffer = io.BytesIO()

    stream = Stream()
    terminal = TerminalInterface(blessed.Terminal(kind='xterm-256color', force_styling=True,
                                                  stream=stream))
    terminal.write("café \udcff")
    assert stream.buffer.getvalue() == b"caf\xc3\xa9 \xff"


def test_read_byte_times_out():
    terminal = make_terminal()
    with patch.object(terminal, '_input_fd', return_value=0), \
         patch('tabula.terminal.select.select', return_value=([], [], [])):
        assert terminal.read_byte(0.01) is None


def test_read_byte_returns_byte():
    terminal = make_terminal()
    with patch.object(terminal, '_input_fd', return_value=0), \
         patch('tabula.terminal.select.select', return_value=([0], [], [])):
        with patch('tabula.terminal.os.read', return_value=b"q"):
            assert terminal.read_byte(None) == ord("q")


def test_reads_from_standard_input():
    terminal = make_terminal()
    with patch('tabula.terminal.sys.stdin') as stdin, \
         patch('tabula.terminal.select.select', return_value=([7], [], [])) as select_mock, \
         patch('tabula.terminal.os.read', return_value=b"z") as read_mock:
        stdin.fileno.return_value = 7
        assert terminal.read_byte(0.5) == ord("z")
    select_mock.assert_called_once_with([7], [], [], 0.5)
    read_mock.assert_called_once_with(7, 1)


def test_cleanup_without_setup_is_harmless():
    terminal = make_terminal()
    terminal.cleanup()
    assert terminal.term.stream.getvalue() == ""
