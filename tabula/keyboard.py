"""Keyboard input decoding from raw terminal bytes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Protocol

from .constants import EditorConstants

ESC = 0x1b


class KeyType(Enum):
    """Types of key events."""
    REGULAR = "regular"  # Printable character (including tab)
    CTRL = "ctrl"  # Control byte without a dedicated name
    SPECIAL = "special"  # Named keys: arrows, enter, escape, ...


@dataclass(frozen=True)
class KeyEvent:
    """Represents a decoded keyboard event."""
    key_type: KeyType
    value: str  # The base key (e.g., 'a', 'q' for Ctrl-Q, 'left', 'backspace')
    raw: bytes = b""  # The bytes that produced this event
    is_ctrl: bool = False
    is_sequence: bool = False
    code: Optional[int] = None


class ByteSource(Protocol):
    def read_byte(self, timeout: Optional[float]) -> Optional[int]:
        """Return the next byte, or None if nothing arrived within timeout."""


class DecoderState(Enum):
    SAW_ESC = "saw_esc"
    SAW_BRACKET = "saw_bracket"
    SAW_BRACKET_DIGIT = "saw_bracket_digit"
    SAW_O = "saw_o"


# ESC [ <digit> ~
TILDE_KEYS = {
    ord('1'): 'home',
    ord('3'): 'delete',
    ord('4'): 'end',
    ord('5'): 'page_up',
    ord('6'): 'page_down',
    ord('7'): 'home',
    ord('8'): 'end',
}

# ESC [ <letter>
BRACKET_KEYS = {
    ord('A'): 'up',
    ord('B'): 'down',
    ord('C'): 'right',
    ord('D'): 'left',
    ord('H'): 'home',
    ord('F'): 'end',
}

# ESC O <letter>
SS3_KEYS = {
    ord('H'): 'home',
    ord('F'): 'end',
}

# Control bytes outside Ctrl-A..Ctrl-Z
CONTROL_SYMBOLS = {
    0: '@',
    28: '\\',
    29: ']',
    30: '^',
    31: '_',
}


def ctrl_key(letter: str) -> int:
    """Byte value produced by Ctrl+letter."""
    return ord(letter) & 0x1f


def escape_key(raw: bytes = b"\x1b") -> KeyEvent:
    return KeyEvent(key_type=KeyType.SPECIAL, value='escape', raw=raw)


def decode_byte(byte: int) -> KeyEvent:
    """Decode a single non-escape ASCII byte."""
    raw = bytes([byte])
    if byte in (10, 13):
        return KeyEvent(key_type=KeyType.SPECIAL, value='enter', raw=raw, code=byte)
    if byte == 127:
        return KeyEvent(key_type=KeyType.SPECIAL, value='backspace', raw=raw, code=byte)
    if byte == 9:
        # Tab inserts like a regular character
        return KeyEvent(key_type=KeyType.REGULAR, value='\t', raw=raw, code=byte)
    if 1 <= byte <= 26:
        ch = chr(ord('a') + byte - 1)
        return KeyEvent(key_type=KeyType.CTRL, value=ch, raw=raw, is_ctrl=True, code=byte)
    if byte in CONTROL_SYMBOLS:
        return KeyEvent(key_type=KeyType.CTRL, value=CONTROL_SYMBOLS[byte], raw=raw,
                        is_ctrl=True, code=byte)
    if byte == ESC:
        return escape_key(raw)
    return KeyEvent(key_type=KeyType.REGULAR, value=chr(byte), raw=raw, code=byte)


def _utf8_length(lead: int) -> int:
    """Total sequence length announced by a UTF-8 lead byte (1 if invalid)."""
    if 0xc2 <= lead <= 0xdf:
        return 2
    if 0xe0 <= lead <= 0xef:
        return 3
    if 0xf0 <= lead <= 0xf4:
        return 4
    return 1


class KeyDecoder:
    """Turns a byte source into an infinite sequence of KeyEvents.

    Decoding is a small state machine. ``ESC`` starts a composite
    sequence; each follow-up byte is awaited for at most
    ``escape_timeout`` seconds, and a missing or unrecognized byte
    yields a bare Escape key. Only the first byte of a key blocks.
    """

    def __init__(self, source: ByteSource,
                 escape_timeout: float = EditorConstants.ESCAPE_SEQUENCE_TIMEOUT,
                 poll_interval: float = EditorConstants.INPUT_POLL_INTERVAL):
        self.source = source
        self.escape_timeout = escape_timeout
        self.poll_interval = poll_interval
        # Byte read ahead that belongs to the next key
        self._pending: Optional[int] = None

    def __iter__(self) -> Iterator[KeyEvent]:
        return self

    def __next__(self) -> KeyEvent:
        return self.read_key()

    def _wait_for_byte(self) -> int:
        if self._pending is not None:
            byte, self._pending = self._pending, None
            return byte
        while True:
            byte = self.source.read_byte(self.poll_interval)
            if byte is not None:
                return byte

    def read_key(self) -> KeyEvent:
        """Block until a full key is available and return it."""
        first = self._wait_for_byte()
        if first == ESC:
            return self._decode_escape()
        if first >= 0x80:
            return self._decode_utf8(first)
        return decode_byte(first)

    def _decode_escape(self) -> KeyEvent:
        state = DecoderState.SAW_ESC
        seq = bytearray([ESC])
        digit = None
        while True:
            byte = self.source.read_byte(self.escape_timeout)
            if byte is None:
                # Terminal went quiet mid-sequence
                return escape_key(bytes(seq))
            seq.append(byte)

            if state == DecoderState.SAW_ESC:
                if byte == ord('['):
                    state = DecoderState.SAW_BRACKET
                elif byte == ord('O'):
                    state = DecoderState.SAW_O
                else:
                    return escape_key(bytes(seq))
            elif state == DecoderState.SAW_BRACKET:
                if ord('0') <= byte <= ord('9'):
                    digit = byte
                    state = DecoderState.SAW_BRACKET_DIGIT
                elif byte in BRACKET_KEYS:
                    return self._special(BRACKET_KEYS[byte], seq)
                else:
                    return escape_key(bytes(seq))
            elif state == DecoderState.SAW_BRACKET_DIGIT:
                if byte == ord('~') and digit in TILDE_KEYS:
                    return self._special(TILDE_KEYS[digit], seq)
                return escape_key(bytes(seq))
            elif state == DecoderState.SAW_O:
                if byte in SS3_KEYS:
                    return self._special(SS3_KEYS[byte], seq)
                return escape_key(bytes(seq))

    @staticmethod
    def _special(name: str, seq: bytearray) -> KeyEvent:
        return KeyEvent(key_type=KeyType.SPECIAL, value=name, raw=bytes(seq), is_sequence=True)

    def _decode_utf8(self, lead: int) -> KeyEvent:
        seq = bytearray([lead])
        for _ in range(_utf8_length(lead) - 1):
            byte = self.source.read_byte(self.escape_timeout)
            if byte is None:
                break
            if not 0x80 <= byte <= 0xbf:
                self._pending = byte
                break
            seq.append(byte)
        text = bytes(seq).decode('utf-8', errors='surrogateescape')
        return KeyEvent(key_type=KeyType.REGULAR, value=text[0], raw=bytes(seq), code=lead)
