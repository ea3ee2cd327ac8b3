"""
Waveform sample unpacking.

Each channel packs four 10-bit samples into five bytes, most significant
bits first:

    b0       b1       b2       b3       b4
    AAAAAAAA AABBBBBB BBBBCCCC CCCCCCDD DDDDDDDD

Bytes are masked to 8 bits before any shift so a value that arrives as a
signed byte cannot smear its sign into the high bits.
"""

import logging

from collections.abc import Sequence

from dinamap.constants import BYTES_PER_CHANNEL, WaveformConstants
from dinamap.parsers.types import DecodedBlock

logger = logging.getLogger(__name__)

WC = WaveformConstants


def unpack_samples(channel_bytes: Sequence[int]) -> list[int]:
    """
    Unpack four raw 10-bit samples from five packed bytes.

    Args:
        channel_bytes: The 5 packed bytes of one channel

    Returns:
        Raw samples s0..s3, each 0..1023

    Raises:
        ValueError: If channel_bytes does not hold exactly 5 bytes
    """
    if len(channel_bytes) != BYTES_PER_CHANNEL:
        raise ValueError(
            f"Expected {BYTES_PER_CHANNEL} packed bytes, got {len(channel_bytes)}"
        )

    b0, b1, b2, b3, b4 = (b & 0xFF for b in channel_bytes)
    mask = WC.SAMPLE_MASK

    return [
        ((b0 << 2) | ((b1 >> 6) & 0x03)) & mask,
        ((b1 << 4) | ((b2 >> 4) & 0x0F)) & mask,
        ((b2 << 6) | ((b3 >> 2) & 0x3F)) & mask,
        ((b3 << 8) | (b4 & 0xFF)) & mask,
    ]


def normalize_spikes(
    samples: Sequence[int], threshold: int = WC.SPIKE_THRESHOLD
) -> list[int]:
    """
    Halve samples above the spike threshold.

    This is a heuristic clip kept for compatibility with existing recordings,
    not a calibrated transform.

    Args:
        samples: Raw unpacked samples
        threshold: Values strictly greater than this are halved

    Returns:
        Normalized samples
    """
    return [s // 2 if s > threshold else s for s in samples]


class WaveformUnpacker:
    """Unpack and normalize the samples of one waveform channel per block."""

    def __init__(self, channel: int = WC.DEFAULT_CHANNEL):
        """
        Initialize unpacker.

        Args:
            channel: Waveform channel to unpack, 1 or 2 (default: 2)
        """
        self.channel = channel

    def unpack(self, block: DecodedBlock) -> list[int]:
        """
        Unpack the configured channel of a block.

        Args:
            block: Decoded block

        Returns:
            Four normalized samples in emission order
        """
        raw = unpack_samples(block.channel(self.channel))
        samples = normalize_spikes(raw)
        if samples != raw:
            logger.debug(f"Block {block.sequence_number}: spikes halved {raw} -> {samples}")
        return samples
