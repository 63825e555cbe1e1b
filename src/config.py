"""
Runtime configuration for pacs-previewer.

Defaults live on AppConfig; AppConfig.from_env() applies environment
overrides, and the CLI applies its flags on top via dataclasses.replace().

Environment
───────────
PACS_PREVIEWER_DATA_DIR   — directory holding pacs.json (default ~/.pacs-previewer)
PACS_PREVIEWER_URL        — page loaded into the viewer at startup
PACS_PREVIEWER_LOG_LEVEL  — DEBUG | INFO | WARNING | ERROR
PACS_PREVIEWER_PROBE_DELAY_MS — pause between the row click and the icon click
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from src.exceptions import ConfigError

__all__ = ["AppConfig"]

logger = logging.getLogger(__name__)

_ENV_PREFIX = "PACS_PREVIEWER_"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(frozen=True)
class AppConfig:
    """Application settings shared by the CLI and the GUI."""
    data_dir:         Path = Path("~/.pacs-previewer")
    store_filename:   str  = "pacs.json"
    home_url:         str  = ""
    left_panel_width: int  = 400        # px reserved for the control panel
    window_width:     int  = 1400
    window_height:    int  = 900
    probe_delay_ms:   int  = 250        # row click → icon click
    log_level:        str  = "INFO"

    @property
    def store_path(self) -> Path:
        """Absolute path of the PACS JSON file."""
        return self.data_dir.expanduser() / self.store_filename

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        """
        Build a config from *environ* (defaults to os.environ).

        Raises:
            ConfigError: an override has an unusable value.
        """
        env = os.environ if environ is None else environ
        kwargs: dict = {}

        data_dir = env.get(_ENV_PREFIX + "DATA_DIR", "").strip()
        if data_dir:
            kwargs["data_dir"] = Path(data_dir)

        home_url = env.get(_ENV_PREFIX + "URL", "").strip()
        if home_url:
            kwargs["home_url"] = home_url

        level = env.get(_ENV_PREFIX + "LOG_LEVEL", "").strip().upper()
        if level:
            if level not in _LOG_LEVELS:
                raise ConfigError(
                    f"{_ENV_PREFIX}LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}, got {level!r}"
                )
            kwargs["log_level"] = level

        delay = env.get(_ENV_PREFIX + "PROBE_DELAY_MS", "").strip()
        if delay:
            try:
                kwargs["probe_delay_ms"] = int(delay)
            except ValueError as exc:
                raise ConfigError(
                    f"{_ENV_PREFIX}PROBE_DELAY_MS must be an integer, got {delay!r}"
                ) from exc
            if kwargs["probe_delay_ms"] < 0:
                raise ConfigError(f"{_ENV_PREFIX}PROBE_DELAY_MS must not be negative")

        return cls(**kwargs)
