"""
Field Decoder

Maps the fixed character offsets of a block record to byte values. Every
byte is two hex digits, high nibble first.
"""

import logging
import re

from dinamap.constants import (
    AUX_DATA_BYTES,
    BYTES_PER_CHANNEL,
    CHECKSUM_BYTES,
    DEFAULT_DECODE_POLICY,
    HEX_BYTE_WIDTH,
    MIN_BLOCK_LENGTH,
    WAVEFORM_CHANNELS,
    BlockOffsets,
    DecodePolicy,
)
from dinamap.parsers.base import FieldDecodeError, MalformedRecordError
from dinamap.parsers.types import DecodedBlock

logger = logging.getLogger(__name__)

_HEX_BYTE = re.compile(r"[0-9A-Fa-f]{2}")


def parse_hex_byte(text: str) -> int | None:
    """
    Parse exactly two hex digits.

    int(text, 16) alone would accept signs, whitespace and underscores,
    so the slice is matched first.

    Returns:
        Byte value, or None if text is not two hex digits
    """
    if _HEX_BYTE.fullmatch(text) is None:
        return None
    return int(text, 16)


class FieldDecoder:
    """
    Decode validated block records into DecodedBlock instances.

    The failure policy decides what a bad hex slice does:
    STRICT raises FieldDecodeError for the whole block, ZERO_FILL
    substitutes 0 for that byte and carries on.
    """

    def __init__(self, policy: DecodePolicy = DEFAULT_DECODE_POLICY):
        self.policy = DecodePolicy(policy)

    def _byte(self, record: str, offset: int, field: str) -> int:
        text = record[offset : offset + HEX_BYTE_WIDTH]
        value = parse_hex_byte(text)
        if value is not None:
            return value

        if self.policy == DecodePolicy.STRICT:
            raise FieldDecodeError(field, offset, text, record)

        logger.debug(f"Substituting 0 for {field} at offset {offset}: {text!r}")
        return 0

    def _bytes(self, record: str, offset: int, count: int, field: str) -> list[int]:
        return [
            self._byte(record, offset + i * HEX_BYTE_WIDTH, f"{field}[{i}]")
            for i in range(count)
        ]

    def decode(self, record: str) -> DecodedBlock:
        """
        Decode one record.

        Args:
            record: Block text with the line terminator removed

        Returns:
            Fully populated DecodedBlock

        Raises:
            MalformedRecordError: If the record is shorter than a full block
            FieldDecodeError: If a hex slice fails to parse under STRICT policy
        """
        if len(record) < MIN_BLOCK_LENGTH:
            raise MalformedRecordError(
                f"Block has {len(record)} characters, need {MIN_BLOCK_LENGTH}",
                record,
            )

        waveform_bytes = [
            self._bytes(
                record,
                BlockOffsets.WAVEFORM_DATA + ch * BYTES_PER_CHANNEL * HEX_BYTE_WIDTH,
                BYTES_PER_CHANNEL,
                f"waveform_bytes[{ch}]",
            )
            for ch in range(WAVEFORM_CHANNELS)
        ]

        return DecodedBlock(
            sequence_number=self._byte(
                record, BlockOffsets.SEQUENCE_NUMBER, "sequence_number"
            ),
            status=self._byte(record, BlockOffsets.STATUS, "status"),
            waveform_bytes=waveform_bytes,
            aux_data=self._bytes(
                record, BlockOffsets.AUX_DATA, AUX_DATA_BYTES, "aux_data"
            ),
            checksum=self._bytes(
                record, BlockOffsets.CHECKSUM, CHECKSUM_BYTES, "checksum"
            ),
            sequence_complement=self._byte(
                record, BlockOffsets.SEQUENCE_COMPLEMENT, "sequence_complement"
            ),
        )
