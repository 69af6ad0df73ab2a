"""Unit tests for structlog configuration driven by Settings."""

from __future__ import annotations

import json
import logging

import pytest

from src.config.settings import Settings
from src.utils.logging import configure_logging, get_logger


def _settings(**overrides) -> Settings:
    defaults = {"app_env": "test", "log_level": "INFO"}
    defaults.update(overrides)
    return Settings(_env_file=None, **defaults)


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """Put back the root handlers so later tests do not write to a closed capture."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


class TestConfigureLogging:
    def test_production_renders_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(_settings(app_env="production"))

        get_logger("tests.logging.json").info("cache_hit", key="k1")

        line = capsys.readouterr().out.strip().splitlines()[-1]
        payload = json.loads(line)
        assert payload["event"] == "cache_hit"
        assert payload["key"] == "k1"
        assert payload["level"] == "info"
        assert payload["logger"] == "tests.logging.json"
        assert "timestamp" in payload

    def test_app_env_from_settings_wins_over_process_env(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        monkeypatch.setenv("APP_ENV", "development")
        configure_logging(_settings(app_env="production"))

        get_logger("tests.logging.env").warning("cache_store_unavailable", key="k2")

        line = capsys.readouterr().out.strip().splitlines()[-1]
        assert json.loads(line)["event"] == "cache_store_unavailable"

    def test_events_below_level_are_dropped(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(_settings(app_env="production", log_level="WARNING"))

        get_logger("tests.logging.level").info("cache_hit", key="k3")

        assert "cache_hit" not in capsys.readouterr().out

    def test_stdlib_records_share_the_formatter(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging(_settings(app_env="production"))

        logging.getLogger("redis.asyncio.connection").error("connection lost")

        payload = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert payload["event"] == "connection lost"
        assert payload["logger"] == "redis.asyncio.connection"
        assert payload["level"] == "error"

    def test_redis_logger_held_at_warning(self) -> None:
        configure_logging(_settings(log_level="DEBUG"))

        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("redis").level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self) -> None:
        configure_logging(_settings(log_level="LOUD"))

        assert logging.getLogger().level == logging.INFO
