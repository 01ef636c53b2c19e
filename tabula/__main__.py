"""Tabula CLI entry point.

Allows running via `python -m tabula` and provides the console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from .version import get_version_string


def _escape_bytes(raw: bytes) -> str:
    """Return a printable representation of raw key bytes."""
    return raw.decode('latin-1').encode('unicode_escape').decode('ascii')


def run_keyboard_test() -> None:
    """Run an interactive keyboard test using the editor's input stack.

    Prints every decoded key event. Quit with ESC.
    """
    from .terminal import TerminalInterface
    from .keyboard import KeyDecoder, KeyType

    print("Keyboard test mode - press keys to see decoded events.")
    print("Quit with ESC.")

    term = TerminalInterface()
    term.setup()
    try:
        for ev in KeyDecoder(term):
            if ev.key_type == KeyType.SPECIAL and ev.value == 'escape':
                break
            parts = [f"type={ev.key_type.value}", f"value={ev.value!r}",
                     f"raw='{_escape_bytes(ev.raw)}'"]
            if ev.is_ctrl:
                parts.append("flags=ctrl")
            if ev.is_sequence:
                parts.append("flags=seq")
            # Raw mode disables output post-processing, so emit CR explicitly
            term.write(' '.join(parts) + "\r\n")
    finally:
        term.cleanup()
    print("Exiting keyboard test.")


def _configure_logging(path: Optional[str]) -> None:
    # Logging to the terminal would corrupt the screen; only log to a file
    if path:
        logging.basicConfig(
            filename=path,
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


def main() -> None:
    # Very small arg parsing to support keyboard test mode, version, logging and optional filename
    args = sys.argv[1:]
    if args and args[0] in ("--version", "-V"):
        print(get_version_string())
        return
    if args and args[0] in ('--keytest', '--keyboard-test'):
        run_keyboard_test()
        return

    log_path = os.environ.get("TABULA_LOG")
    if len(args) >= 2 and args[0] == '--log':
        log_path = args[1]
        args = args[2:]
    _configure_logging(log_path)

    # Lazy import to avoid importing UI deps for --version
    from .editor import EditorSession, EditorError
    from .settings import load_settings
    from .terminal import TerminalError

    editor = EditorSession(settings=load_settings())
    try:
        if args:
            editor.load_file(args[0])
        editor.run()
    except (EditorError, TerminalError) as e:
        print(f"tabula: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":  # pragma: no cover
    main()
