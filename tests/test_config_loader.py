"""Tests for YAML/environment configuration loading."""

import pytest

from channelape.config import loader


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "app.yaml"
    path.write_text(
        "global:\n"
        "  log_level: DEBUG\n"
        "channelape:\n"
        "  endpoint: https://staging-api.channelape.com\n"
        "  session_id: yaml-session\n"
        "  timeout: 5000\n"
        "  max_pages: 20\n"
    )
    loader.reload_config()
    loader.load_config(str(path))
    yield path
    loader.reload_config()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in (
        "CHANNELAPE_SESSION_ID",
        "CHANNELAPE_EMAIL",
        "CHANNELAPE_PASSWORD",
        "CHANNELAPE_ENDPOINT",
        "CHANNELAPE_TIMEOUT",
        "CHANNELAPE_MAX_RETRY_TIMEOUT",
        "CHANNELAPE_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)


class TestLoader:
    def test_missing_file(self, tmp_path):
        loader.reload_config()
        with pytest.raises(FileNotFoundError):
            loader.load_config(str(tmp_path / "missing.yaml"))

    def test_dot_notation(self, config_file):
        assert loader.cfg("global.log_level") == "DEBUG"
        assert loader.cfg("channelape.max_pages") == 20
        assert loader.cfg("channelape.unknown", "fallback") == "fallback"
        assert loader.cfg("global")["log_level"] == "DEBUG"

    def test_config_is_cached(self, config_file):
        config_file.write_text("global:\n  log_level: ERROR\n")
        assert loader.cfg("global.log_level") == "DEBUG"

    def test_channelape_settings_from_yaml(self, config_file):
        settings = loader.get_channelape_config()

        assert settings == {
            "session_id": "yaml-session",
            "endpoint": "https://staging-api.channelape.com",
            "timeout": 5000,
            "max_pages": 20,
        }

    def test_environment_wins(self, config_file, monkeypatch):
        monkeypatch.setenv("CHANNELAPE_SESSION_ID", "env-session")
        monkeypatch.setenv("CHANNELAPE_TIMEOUT", "9000")

        settings = loader.get_channelape_config()

        assert settings["session_id"] == "env-session"
        assert settings["timeout"] == 9000
