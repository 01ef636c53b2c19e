"""User settings for the editor.

Settings are read from ``settings.json`` in the OS-appropriate config
directory. Missing files, unreadable files and invalid values fall back
to the defaults in ``EditorConstants``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .constants import EditorConstants

logger = logging.getLogger(__name__)


@dataclass
class EditorSettings:
    tab_stop: int = EditorConstants.TAB_STOP
    quit_times: int = EditorConstants.QUIT_TIMES
    message_timeout: float = EditorConstants.MESSAGE_TIMEOUT
    escape_timeout: float = EditorConstants.ESCAPE_SEQUENCE_TIMEOUT

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EditorSettings":
        """Build settings from a mapping, ignoring unknown or invalid keys."""
        settings = cls()
        for field in fields(cls):
            if field.name not in data:
                continue
            value = data[field.name]
            default = getattr(settings, field.name)
            # bool is an int subclass; reject it explicitly
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                logger.warning(f"Ignoring setting {field.name}={value!r}: not a number")
                continue
            if value <= 0:
                logger.warning(f"Ignoring setting {field.name}={value!r}: must be positive")
                continue
            setattr(settings, field.name, type(default)(value))
        return settings


def default_settings_path() -> Path:
    return Path(platformdirs.user_config_dir("tabula")) / "settings.json"


def load_settings(path: Optional[Path] = None) -> EditorSettings:
    """Load settings from ``path`` (default: the user config directory)."""
    settings_file = path or default_settings_path()
    if not settings_file.exists():
        return EditorSettings()
    try:
        with open(settings_file, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Could not load settings from {settings_file}: {e}")
        return EditorSettings()
    if not isinstance(data, dict):
        logger.warning("Settings file has invalid format (not a dict), ignoring")
        return EditorSettings()
    return EditorSettings.from_dict(data)
