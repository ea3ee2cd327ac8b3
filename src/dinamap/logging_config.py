"""
Logging configuration for dinamap.

Console output goes to stderr; a rotating file log is kept under
~/.dinamap/logs unless the [logging] config section disables it. The decode
debug level routes the per-block field dump to the console on its own
handler, so a dump does not also turn on every other DEBUG message.
"""

import logging
import logging.config
import os
import sys

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from dinamap.constants import (
    BLOCK_DUMP_LOGGER,
    DEFAULT_LOG_BACKUP_COUNT,
    DEFAULT_LOG_DIR,
    DEFAULT_LOG_FILE,
    DEFAULT_LOG_MAX_BYTES,
)

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Arguments of the active configuration; None until setup_logging runs.
_active_setup: tuple[bool, str | None, int] | None = None


class LoggingSettings(BaseModel):
    """Settings for the [logging] config section."""

    enabled: bool = Field(default=True, description="Write the rotating file log")
    level: str = Field(default="DEBUG", description="File log level")
    max_size_mb: float | None = Field(
        default=None, gt=0, description="Rotate after this many megabytes"
    )
    backup_count: int = Field(
        default=DEFAULT_LOG_BACKUP_COUNT, ge=0, description="Rotated files kept"
    )

    @property
    def max_bytes(self) -> int:
        if self.max_size_mb is None:
            return DEFAULT_LOG_MAX_BYTES
        return int(self.max_size_mb * 1024 * 1024)


def get_log_path() -> Path:
    """
    Get path to the active log file, creating its directory if needed.

    Returns:
        Path to dinamap.log
    """
    os.makedirs(DEFAULT_LOG_DIR, mode=0o700, exist_ok=True)
    return DEFAULT_LOG_DIR / DEFAULT_LOG_FILE


def get_logging_settings() -> LoggingSettings:
    """Read the [logging] config section, falling back to defaults if invalid."""
    from dinamap.config import load_config

    section = load_config().get("logging", {})
    if not isinstance(section, dict):
        return LoggingSettings()

    try:
        return LoggingSettings(**section)
    except ValidationError as e:
        sys.stderr.write(f"WARNING: Ignoring invalid [logging] config: {e}\n")
        return LoggingSettings()


def _build_logging_config(
    verbose: bool = False,
    console_format: str | None = None,
    debug_level: int = 0,
) -> dict[str, Any]:
    """
    Build the dictConfig configuration dictionary.

    Args:
        verbose: If True, set console to DEBUG level
        console_format: Override console format string
        debug_level: Decode debug level; above 0 the block dump is shown

    Returns:
        Dictionary suitable for logging.config.dictConfig()
    """
    settings = get_logging_settings()

    config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {"format": console_format or LOG_FORMAT},
            "file": {"format": LOG_FORMAT},
            "block_dump": {"format": "%(message)s"},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": "DEBUG" if verbose else "INFO",
                "formatter": "console",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {},
        "root": {
            "level": "DEBUG",
            "handlers": ["console"],
        },
    }

    if settings.enabled:
        config["handlers"]["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": settings.level.upper(),
            "formatter": "file",
            "filename": str(get_log_path()),
            "maxBytes": settings.max_bytes,
            "backupCount": settings.backup_count,
            "encoding": "utf-8",
        }
        config["root"]["handlers"].append("file")

    if debug_level > 0 and not verbose:
        # verbose already shows DEBUG on the console; a second handler would
        # print the dump twice
        config["handlers"]["block_dump"] = {
            "class": "logging.StreamHandler",
            "level": "DEBUG",
            "formatter": "block_dump",
            "stream": "ext://sys.stderr",
        }
        config["loggers"][BLOCK_DUMP_LOGGER] = {
            "level": "DEBUG",
            "handlers": ["block_dump"],
        }

    return config


def setup_logging(
    *,
    verbose: bool = False,
    console_format: str | None = None,
    debug_level: int = 0,
) -> None:
    """
    Configure logging for dinamap.

    Repeated calls with the same arguments do nothing; a call with different
    arguments (e.g. a decode command raising the debug level after the CLI
    group configured logging) rebuilds the configuration.

    Args:
        verbose: If True, set console to DEBUG level
        console_format: Override console format string. If None, uses full format.
        debug_level: Decode debug level; above 0 the block dump is printed
    """
    global _active_setup

    requested = (verbose, console_format, debug_level)
    if _active_setup == requested:
        return

    try:
        config = _build_logging_config(
            verbose=verbose, console_format=console_format, debug_level=debug_level
        )
        logging.config.dictConfig(config)
    except (OSError, ValueError, TypeError) as e:
        sys.stderr.write(f"WARNING: Failed to configure logging: {e}\n")
        logging.basicConfig(
            level=logging.DEBUG if verbose or debug_level > 0 else logging.INFO,
            format=console_format or "%(levelname)s: %(message)s",
        )

    _active_setup = requested
    logger.debug(f"Logging configured: verbose={verbose}, debug_level={debug_level}")
