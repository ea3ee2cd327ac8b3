"""Configuration management for dinamap."""

import logging
import os
import tomllib

from pathlib import Path
from typing import Any

import tomli_w

from pydantic import BaseModel, Field, ValidationError

from dinamap.constants import (
    DEFAULT_CONFIG_DIR,
    DEFAULT_CONFIG_FILE,
    DEFAULT_DECODE_POLICY,
    MIN_BLOCK_LENGTH,
    WAVEFORM_CHANNELS,
    DecodePolicy,
    WaveformConstants,
)

logger = logging.getLogger(__name__)

DECODER_SECTION = "decoder"


class DecoderSettings(BaseModel):
    """Settings for the [decoder] config section."""

    policy: DecodePolicy = Field(
        default=DEFAULT_DECODE_POLICY, description="Hex field failure policy"
    )
    channel: int = Field(
        default=WaveformConstants.DEFAULT_CHANNEL,
        ge=1,
        le=WAVEFORM_CHANNELS,
        description="Waveform channel to unpack",
    )
    min_block_length: int = Field(
        default=MIN_BLOCK_LENGTH,
        ge=MIN_BLOCK_LENGTH,
        description="Minimum record length in characters",
    )


def get_config_path() -> Path:
    """
    Get the path to the configuration file.

    Returns:
        Path to ~/.dinamap/config.toml
    """
    return DEFAULT_CONFIG_DIR / DEFAULT_CONFIG_FILE


def load_config() -> dict[str, Any]:
    """
    Load configuration from TOML file.

    Returns:
        Configuration dictionary. Returns empty dict if file doesn't exist
        or is corrupted.
    """
    config_path = get_config_path()

    if not config_path.exists():
        return {}

    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning(f"Failed to load config from {config_path}: {e}")
        logger.warning("Treating config as empty. Fix or delete the file to resolve.")
        return {}


def save_config(config: dict[str, Any]) -> None:
    """
    Save configuration to TOML file using atomic write.

    Creates the parent directory if it doesn't exist.
    Uses temp file + rename for atomic operation.

    Args:
        config: Configuration dictionary to save

    Raises:
        PermissionError: If directory cannot be created or file cannot be written
    """
    config_path = get_config_path()

    config_dir = config_path.parent
    try:
        os.makedirs(config_dir, exist_ok=True)
    except PermissionError as e:
        raise PermissionError(
            f"Cannot create config directory {config_dir}: {e}"
        ) from e

    temp_path = config_path.with_suffix(".toml.tmp")

    try:
        with open(temp_path, "wb") as f:
            tomli_w.dump(config, f)

        os.replace(temp_path, config_path)

    except Exception:
        if temp_path.exists():
            temp_path.unlink()
        raise


def get_decoder_settings(**overrides: Any) -> DecoderSettings:
    """
    Build decoder settings from config, with explicit overrides on top.

    Overrides whose value is None are ignored, so CLI options that were not
    given fall through to the config file and then to defaults.

    Args:
        **overrides: Setting values taking precedence over the config file

    Returns:
        Validated DecoderSettings

    Raises:
        ValueError: If an override is invalid
    """
    section = load_config().get(DECODER_SECTION, {})
    if not isinstance(section, dict):
        section = {}

    try:
        settings = DecoderSettings(**section)
    except ValidationError as e:
        logger.warning(f"Ignoring invalid [{DECODER_SECTION}] config: {e}")
        settings = DecoderSettings()

    explicit = {k: v for k, v in overrides.items() if v is not None}
    if not explicit:
        return settings

    try:
        return DecoderSettings(**{**settings.model_dump(), **explicit})
    except ValidationError as e:
        raise ValueError(f"Invalid decoder settings: {e}") from e


def set_decoder_option(key: str, value: Any) -> DecoderSettings:
    """
    Set a [decoder] option in the config file.

    Args:
        key: Setting name (policy, channel, min_block_length)
        value: New value, validated before saving

    Returns:
        The resulting decoder settings

    Raises:
        KeyError: If key is not a decoder setting
        ValueError: If value is invalid for key
    """
    if key not in DecoderSettings.model_fields:
        raise KeyError(key)

    config = load_config()
    section = dict(config.get(DECODER_SECTION, {}))
    section[key] = value

    try:
        settings = DecoderSettings(**section)
    except ValidationError as e:
        raise ValueError(f"Invalid value for {key}: {value!r}") from e

    config[DECODER_SECTION] = settings.model_dump(mode="json", include=set(section))
    save_config(config)
    return settings


def unset_decoder_option(key: str) -> None:
    """
    Remove a [decoder] option from the config file.

    If this was the only setting in the decoder section, removes the section.
    If config becomes empty, deletes the config file.
    """
    config = load_config()

    if DECODER_SECTION in config and key in config[DECODER_SECTION]:
        del config[DECODER_SECTION][key]

        if not config[DECODER_SECTION]:
            del config[DECODER_SECTION]

        if not config:
            config_path = get_config_path()
            if config_path.exists():
                config_path.unlink()
        else:
            save_config(config)
