"""
Unit tests for src/config.py

Coverage plan
─────────────
defaults      → 2 tests
from_env      → 5 tests  (overrides, invalid values)
"""

from pathlib import Path

import pytest


class TestAppConfigDefaults:

    def test_window_and_panel_sizes(self):
        from src.config import AppConfig
        cfg = AppConfig()
        assert (cfg.window_width, cfg.window_height) == (1400, 900)
        assert cfg.left_panel_width == 400
        assert cfg.probe_delay_ms == 250

    def test_store_path_joins_data_dir_and_filename(self, tmp_path):
        from src.config import AppConfig
        cfg = AppConfig(data_dir=tmp_path)
        assert cfg.store_path == tmp_path / "pacs.json"


class TestAppConfigFromEnv:

    def test_empty_environment_gives_defaults(self):
        from src.config import AppConfig
        assert AppConfig.from_env({}) == AppConfig()

    def test_overrides_are_applied(self):
        from src.config import AppConfig
        cfg = AppConfig.from_env({
            "PACS_PREVIEWER_DATA_DIR": "/srv/pacs",
            "PACS_PREVIEWER_URL": "https://pacs.example/",
            "PACS_PREVIEWER_LOG_LEVEL": "debug",
            "PACS_PREVIEWER_PROBE_DELAY_MS": "500",
        })
        assert cfg.data_dir == Path("/srv/pacs")
        assert cfg.home_url == "https://pacs.example/"
        assert cfg.log_level == "DEBUG"
        assert cfg.probe_delay_ms == 500

    def test_bad_log_level_raises(self):
        from src.config import AppConfig
        from src.exceptions import ConfigError
        with pytest.raises(ConfigError, match="LOG_LEVEL"):
            AppConfig.from_env({"PACS_PREVIEWER_LOG_LEVEL": "chatty"})

    @pytest.mark.parametrize("value", ["soon", "-1"])
    def test_bad_probe_delay_raises(self, value):
        from src.config import AppConfig
        from src.exceptions import ConfigError
        with pytest.raises(ConfigError, match="PROBE_DELAY_MS"):
            AppConfig.from_env({"PACS_PREVIEWER_PROBE_DELAY_MS": value})

    def test_blank_values_are_ignored(self):
        from src.config import AppConfig
        assert AppConfig.from_env({"PACS_PREVIEWER_DATA_DIR": "  "}) == AppConfig()
