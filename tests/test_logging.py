"""
Tests for logging settings and the ``dip`` logger setup.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from dip.core.observability.logging_config import (
    LOGGER_NAME,
    LogSettings,
    configure_logging,
    parse_level,
    resolve_settings,
)


class TestResolveSettings:
    def test_default(self):
        settings = resolve_settings(env={})
        assert settings.level == logging.WARNING
        assert settings.log_file is None

    def test_env_level(self):
        assert resolve_settings(env={"DIP_LOG_LEVEL": "info"}).level == logging.INFO

    @pytest.mark.parametrize(
        ("flags", "expected"),
        [
            ({"debug": True}, logging.DEBUG),
            ({"verbose": True}, logging.INFO),
            ({"quiet": True}, logging.ERROR),
            ({"debug": True, "quiet": True}, logging.DEBUG),
        ],
    )
    def test_flags_beat_env(self, flags, expected):
        settings = resolve_settings(env={"DIP_LOG_LEVEL": "CRITICAL"}, **flags)
        assert settings.level == expected

    def test_log_file_from_env(self, tmp_path: Path):
        env = {"DIP_LOG_FILE": str(tmp_path / "dip.log"), "DIP_LOG_FILE_LEVEL": "warning"}
        settings = resolve_settings(env=env)
        assert settings.log_file == str(tmp_path / "dip.log")
        assert settings.file_level == logging.WARNING

    def test_unknown_level_falls_back(self):
        assert parse_level("LOUD", logging.WARNING) == logging.WARNING
        assert parse_level("", logging.DEBUG) == logging.DEBUG


class TestConfigureLogging:
    def test_attaches_to_dip_namespace_only(self):
        root_handlers = list(logging.getLogger().handlers)
        logger = configure_logging(LogSettings(level=logging.INFO))

        assert logger.name == LOGGER_NAME
        assert logger.level == logging.INFO
        assert len(logger.handlers) == 1
        assert logger.propagate is False
        assert logging.getLogger().handlers == root_handlers

    def test_repeat_calls_replace_handlers(self):
        configure_logging(LogSettings())
        logger = configure_logging(LogSettings())
        assert len(logger.handlers) == 1

    def test_log_file_gets_own_level(self, tmp_path: Path):
        log_file = tmp_path / "dip.log"
        logger = configure_logging(
            LogSettings(level=logging.WARNING, log_file=str(log_file), file_level=logging.DEBUG)
        )

        assert logger.level == logging.DEBUG
        logging.getLogger("dip.bundlers.test").debug("only in the file")
        for handler in logger.handlers:
            handler.flush()
        assert "only in the file" in log_file.read_text()
