"""Pytest configuration and fixtures for dinamap tests."""

import logging

from pathlib import Path

import pytest

from dinamap import logging_config
from dinamap.constants import BLOCK_DUMP_LOGGER


def pytest_configure(config):
    """Register custom test markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that do not require external dependencies"
    )
    config.addinivalue_line("markers", "parser: Tests for block reading and decoding")
    config.addinivalue_line(
        "markers", "business_logic: Tests for event detection and waveform unpacking"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests combining multiple components"
    )


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the config file at a per-test temporary directory."""
    config_path = tmp_path / "dinamap_home" / "config.toml"
    monkeypatch.setattr("dinamap.config.get_config_path", lambda: config_path)
    return config_path


@pytest.fixture
def block_file(tmp_path):
    """Factory writing a list of lines to a temporary block file."""

    def _write(lines: list[str], name: str = "blocks.txt") -> Path:
        path = tmp_path / name
        path.write_text("".join(lines), encoding="ascii")
        return path

    return _write


@pytest.fixture
def restore_logging(tmp_path, monkeypatch):
    """Let a test run the real setup_logging, then undo what it installed."""
    monkeypatch.setattr(logging_config, "DEFAULT_LOG_DIR", tmp_path / "logs")
    monkeypatch.setattr(logging_config, "_active_setup", None)
    root = logging.getLogger()
    dump = logging.getLogger(BLOCK_DUMP_LOGGER)
    saved = (root.level, root.handlers[:], dump.level, dump.handlers[:])

    yield

    for log in (root, dump):
        for handler in log.handlers:
            if handler not in saved[1] and handler not in saved[3]:
                handler.close()
    root.setLevel(saved[0])
    root.handlers[:] = saved[1]
    dump.setLevel(saved[2])
    dump.handlers[:] = saved[3]
