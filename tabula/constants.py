"""Constants and configuration defaults for the tabula editor."""

class EditorConstants:
    """Central configuration constants for the editor."""

    # Rendering
    TAB_STOP = 8  # Tabs expand so the next cell lands on a multiple of this
    EMPTY_ROW_GLYPH = "~"  # Filler drawn for rows past the end of the document
    WELCOME_MESSAGE = "Tabula editor -- version {}"
    FILENAME_DISPLAY_WIDTH = 20  # Status bar truncates long filenames
    NO_NAME = "[No Name]"

    # Screen layout
    RESERVED_ROWS = 2  # Status bar + message bar

    # Keyboard timing
    ESCAPE_SEQUENCE_TIMEOUT = 0.1  # Wait for the rest of an escape sequence (seconds)
    INPUT_POLL_INTERVAL = 0.1  # Poll interval while waiting for a keypress (seconds)

    # Session behavior
    QUIT_TIMES = 3  # Ctrl-Q presses needed to quit with unsaved changes
    MESSAGE_TIMEOUT = 5.0  # Seconds a status message stays visible

    # Status messages
    HELP_MESSAGE = "HELP: Ctrl-S = save | Ctrl-Q = quit"
    SAVE_PROMPT = "Save as: {} (ESC to cancel)"
    SAVE_ABORTED_MESSAGE = "Save aborted"
    SAVED_MESSAGE = "{} bytes written to disk"
    SAVE_ERROR_MESSAGE = "Can't save! I/O error: {}"
    QUIT_WARNING_MESSAGE = (
        "WARNING!!! File has unsaved changes. Press Ctrl-Q {} more times to quit."
    )

    # Terminal size fallback
    CURSOR_QUERY_TIMEOUT = 1.0  # Seconds to wait for a cursor position report

    # Window size used until the terminal has been queried
    DEFAULT_ROWS = 24
    DEFAULT_COLS = 80
