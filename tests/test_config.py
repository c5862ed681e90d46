"""Tests for process configuration overrides."""

import json
from pathlib import Path

from pomofocus.config import Config


class TestConfigLoad:
    def test_env_overrides(self, tmp_path, monkeypatch):
        monkeypatch.setenv("POMO_DATA_DIR", str(tmp_path / "data"))
        monkeypatch.setenv("POMO_API_PORT", "9100")
        monkeypatch.setenv("POMO_DESKTOP_NOTIFICATIONS", "true")
        monkeypatch.setenv("POMO_TICK_INTERVAL_S", "0.5")
        cfg = Config.load()
        assert cfg.api_port == 9100
        assert cfg.desktop_notifications is True
        assert cfg.tick_interval_s == 0.5
        assert cfg.settings_path == Path(tmp_path / "data" / "settings.json")

    def test_defaults(self, tmp_path):
        cfg = Config(data_dir=tmp_path)
        assert cfg.api_host == "127.0.0.1"
        assert cfg.projection_refresh_s == 60
        assert cfg.desktop_notifications is False

    def test_file_then_env_precedence(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({
            "api_port": "9000",
            "log_level": "debug",
            "data_dir": str(tmp_path / "from-file"),
        }))
        cfg = Config.load(config_file, environ={"POMO_API_PORT": "9200"})
        assert cfg.api_port == 9200
        assert cfg.log_level == "debug"
        assert cfg.data_dir == tmp_path / "from-file"
        assert cfg.data_dir.is_dir()

    def test_invalid_and_unknown_values_are_ignored(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"api_port": "not-a-port", "mystery": 1}))
        cfg = Config.load(config_file, environ={"POMO_DATA_DIR": str(tmp_path)})
        assert cfg.api_port == 8765
        assert not hasattr(cfg, "mystery")

    def test_malformed_file_is_ignored(self, tmp_path):
        config_file = tmp_path / "config.json"
        config_file.write_text("{not json")
        cfg = Config.load(config_file, environ={"POMO_DATA_DIR": str(tmp_path)})
        assert cfg.api_port == 8765
