"""User configuration for the editor.

Settings are read from ``config.json`` in the OS-appropriate config
directory, then overridden by ``WRAPEDIT_*`` environment variables.
Anything missing or invalid falls back to the defaults in
``EditorConstants``.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import platformdirs

from .constants import EditorConstants

logger = logging.getLogger(__name__)


@dataclass
class EditorConfig:
    """Settings the editor core reads at startup."""

    max_line_length: Optional[int] = EditorConstants.MAX_LINE_LENGTH
    poll_timeout: float = EditorConstants.POLL_TIMEOUT
    status_rows: int = EditorConstants.STATUS_ROWS


def validate_setting(key: str, value: Any) -> bool:
    """Check a single setting value.

    Args:
        key: Setting key name.
        value: Setting value to validate.

    Returns:
        True if the value is acceptable for ``key``.
    """
    if key == 'max_line_length':
        if value is None:
            return True  # None means no limit
        return isinstance(value, int) and not isinstance(value, bool) and value > 0
    if key == 'poll_timeout':
        return isinstance(value, (int, float)) and not isinstance(value, bool) and 0 < value <= 5
    if key == 'status_rows':
        return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= 3
    # Unknown settings are ignored (forward compatibility)
    return False


class ConfigLoader:
    """Loads ``EditorConfig`` from disk and the environment."""

    def __init__(self, config_dir: Optional[Path] = None):
        self._config_dir = config_dir or Path(platformdirs.user_config_dir("wrapedit"))
        self._config_file = self._config_dir / "config.json"

    @property
    def config_file(self) -> Path:
        return self._config_file

    def _load_file_settings(self) -> Dict[str, Any]:
        """Read the JSON settings file.

        Returns:
            The settings dict, or an empty dict if the file is missing or
            unreadable.
        """
        if not self._config_file.exists():
            return {}
        try:
            with open(self._config_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not load settings from {self._config_file}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning("Settings file has invalid format (not a dict), ignoring")
            return {}
        return data

    def _load_env_settings(self, environ: Mapping[str, str]) -> Dict[str, Any]:
        settings: Dict[str, Any] = {}
        raw_limit = environ.get(f"{EditorConstants.ENV_PREFIX}MAX_LINE_LENGTH")
        if raw_limit is not None:
            if raw_limit.strip().lower() in ('', 'none', '0'):
                settings['max_line_length'] = None
            else:
                try:
                    settings['max_line_length'] = int(raw_limit)
                except ValueError:
                    logger.warning(f"Ignoring invalid MAX_LINE_LENGTH: {raw_limit!r}")
        raw_timeout = environ.get(f"{EditorConstants.ENV_PREFIX}POLL_TIMEOUT")
        if raw_timeout is not None:
            try:
                settings['poll_timeout'] = float(raw_timeout)
            except ValueError:
                logger.warning(f"Ignoring invalid POLL_TIMEOUT: {raw_timeout!r}")
        return settings

    def load(self, environ: Optional[Mapping[str, str]] = None) -> EditorConfig:
        """Build the effective configuration."""
        merged = self._load_file_settings()
        merged.update(self._load_env_settings(os.environ if environ is None else environ))

        config = EditorConfig()
        known = {f.name for f in fields(EditorConfig)}
        for key, value in merged.items():
            if key not in known:
                logger.debug(f"Ignoring unknown setting {key!r}")
                continue
            if not validate_setting(key, value):
                logger.warning(f"Ignoring invalid value for {key}: {value!r}")
                continue
            setattr(config, key, value)
        return config


def load_config(environ: Optional[Mapping[str, str]] = None) -> EditorConfig:
    return ConfigLoader().load(environ)
