"""
Constants for Dinamap Pro 1000 binary block decoding.

Offsets are character positions in the ASCII-hex text form of a block.
"""

from enum import Enum
from pathlib import Path

# ============================================================================
# Block Layout
# ============================================================================

MIN_BLOCK_LENGTH = 36
HEX_BYTE_WIDTH = 2

WAVEFORM_CHANNELS = 2
BYTES_PER_CHANNEL = 5
AUX_DATA_BYTES = 3
CHECKSUM_BYTES = 2


class BlockOffsets:
    """Character offsets of each field within a block (block layout table)."""

    SEQUENCE_NUMBER = 0
    STATUS = 2
    WAVEFORM_DATA = 4  # 2 channels x 5 bytes, channel 1 first
    AUX_DATA = 24
    CHECKSUM = 30  # two bytes: 30 and 32
    SEQUENCE_COMPLEMENT = 34


# ============================================================================
# Waveform Status Bits
# ============================================================================


class StatusMasks:
    """Bit masks applied to the waveform status byte."""

    QRS = 0x06  # edge-triggered, any change within the group
    BREATH = 0x18  # edge-triggered, any change within the group
    WARNING_ALARM = 0x20  # level-triggered
    CRISIS_ALARM = 0x40  # level-triggered


class AlarmLevel(str, Enum):
    """Alarm severities carried in the status byte."""

    WARNING = "warning"
    CRISIS = "crisis"


# ============================================================================
# Waveform Samples
# ============================================================================


class WaveformConstants:
    """Constants for waveform unpacking and display."""

    SAMPLE_BITS = 10
    SAMPLE_MASK = 0x3FF
    SAMPLES_PER_BLOCK = 4

    # Samples above this are treated as unpacking spikes and halved.
    # Heuristic only, not a calibrated transform.
    SPIKE_THRESHOLD = 1000

    BLOCK_RATE_HZ = 50
    SAMPLE_INTERVAL_SECONDS = 0.005  # 4 samples per 20 ms block

    DEFAULT_CHANNEL = 2


# ============================================================================
# Decoder Policy
# ============================================================================


class DecodePolicy(str, Enum):
    """How a hex slice that fails to parse is handled."""

    STRICT = "strict"  # reject the whole block as malformed
    ZERO_FILL = "zero_fill"  # substitute 0 and keep going


DEFAULT_DECODE_POLICY = DecodePolicy.STRICT

# ============================================================================
# Paths
# ============================================================================

DEFAULT_CONFIG_DIR = Path.home() / ".dinamap"
DEFAULT_CONFIG_FILE = "config.toml"

DEFAULT_LOG_DIR = DEFAULT_CONFIG_DIR / "logs"
DEFAULT_LOG_FILE = "dinamap.log"
DEFAULT_LOG_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
DEFAULT_LOG_BACKUP_COUNT = 5

# Per-block field dump, enabled by the decode debug level
BLOCK_DUMP_LOGGER = "dinamap.block_dump"

# ============================================================================
# Display
# ============================================================================

DEFAULT_PLOT_WIDTH = 80
DEFAULT_PLOT_HEIGHT = 20
