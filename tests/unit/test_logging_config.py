"""
Tests for the dictConfig logging setup.
"""

import logging

import pytest

from dinamap import logging_config
from dinamap.config import save_config
from dinamap.constants import BLOCK_DUMP_LOGGER, DEFAULT_LOG_MAX_BYTES


@pytest.fixture(autouse=True)
def log_dir(tmp_path, monkeypatch):
    path = tmp_path / "logs"
    monkeypatch.setattr(logging_config, "DEFAULT_LOG_DIR", path)
    return path


class TestBuildLoggingConfig:
    def test_defaults(self, log_dir):
        config = logging_config._build_logging_config()

        assert config["handlers"]["console"]["level"] == "INFO"
        assert config["root"]["handlers"] == ["console", "file"]

        file_handler = config["handlers"]["file"]
        assert file_handler["class"] == "logging.handlers.RotatingFileHandler"
        assert file_handler["filename"] == str(log_dir / "dinamap.log")
        assert file_handler["maxBytes"] == DEFAULT_LOG_MAX_BYTES
        assert log_dir.is_dir()

    def test_verbose_console(self):
        config = logging_config._build_logging_config(
            verbose=True, console_format="%(message)s"
        )

        assert config["handlers"]["console"]["level"] == "DEBUG"
        assert config["formatters"]["console"]["format"] == "%(message)s"

    def test_user_settings(self):
        save_config(
            {"logging": {"level": "warning", "max_size_mb": 1, "backup_count": 2}}
        )

        file_handler = logging_config._build_logging_config()["handlers"]["file"]

        assert file_handler["level"] == "WARNING"
        assert file_handler["maxBytes"] == 1024 * 1024
        assert file_handler["backupCount"] == 2

    def test_file_logging_disabled(self):
        save_config({"logging": {"enabled": False}})

        config = logging_config._build_logging_config()

        assert "file" not in config["handlers"]
        assert config["root"]["handlers"] == ["console"]

    def test_block_dump_handler_for_debug_level(self):
        config = logging_config._build_logging_config(debug_level=1)

        handler = config["handlers"]["block_dump"]
        assert handler["level"] == "DEBUG"
        assert handler["stream"] == "ext://sys.stderr"
        assert config["loggers"][BLOCK_DUMP_LOGGER]["handlers"] == ["block_dump"]
        assert config["handlers"]["console"]["level"] == "INFO"

    def test_no_block_dump_without_debug_level(self):
        config = logging_config._build_logging_config()

        assert "block_dump" not in config["handlers"]
        assert BLOCK_DUMP_LOGGER not in config["loggers"]

    def test_verbose_console_already_shows_block_dump(self):
        config = logging_config._build_logging_config(verbose=True, debug_level=2)

        assert "block_dump" not in config["handlers"]



class TestSetupLogging:
    def test_repeat_call_keeps_configuration(self, restore_logging):
        logging_config.setup_logging()
        handlers = logging.getLogger().handlers[:]

        logging_config.setup_logging()

        assert logging.getLogger().handlers == handlers

    def test_debug_level_reconfigures(self, restore_logging, capsys):
        logging_config.setup_logging(console_format="%(message)s")
        logging_config.setup_logging(console_format="%(message)s", debug_level=1)

        logging.getLogger(BLOCK_DUMP_LOGGER).debug("  status: 5a")
        logging.getLogger("dinamap.analysis.service").debug("internal detail")

        err = capsys.readouterr().err
        assert "  status: 5a" in err
        assert "internal detail" not in err
