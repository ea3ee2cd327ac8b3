"""Parser type definitions."""

from pydantic import BaseModel, Field, field_validator

from dinamap.constants import (
    AUX_DATA_BYTES,
    BYTES_PER_CHANNEL,
    CHECKSUM_BYTES,
    WAVEFORM_CHANNELS,
)


def _check_bytes(values: list[int], count: int, name: str) -> list[int]:
    if len(values) != count:
        raise ValueError(f"{name} must have {count} bytes, got {len(values)}")
    for value in values:
        if not 0 <= value <= 0xFF:
            raise ValueError(f"{name} byte out of range: {value}")
    return values


class DecodedBlock(BaseModel):
    """
    One Dinamap binary block decoded from its ASCII-hex text form.

    Blocks are transient: each is handed to the waveform unpacker and the
    status detector and then dropped.
    """

    sequence_number: int = Field(
        ge=0, le=0xFF, description="Block sequence number, modulo 200"
    )
    status: int = Field(ge=0, le=0xFF, description="Waveform status bits")
    waveform_bytes: list[list[int]] = Field(
        description="Packed waveform data, 2 channels x 5 bytes"
    )
    aux_data: list[int] = Field(
        description="Non-waveform parameter data and status (3 bytes)"
    )
    checksum: list[int] = Field(description="Block checksum (2 bytes)")
    sequence_complement: int = Field(
        ge=0, le=0xFF, description="One's complement of sequence number"
    )

    @field_validator("waveform_bytes")
    @classmethod
    def _validate_waveform_bytes(cls, value: list[list[int]]) -> list[list[int]]:
        if len(value) != WAVEFORM_CHANNELS:
            raise ValueError(
                f"waveform_bytes must have {WAVEFORM_CHANNELS} channels, got {len(value)}"
            )
        for channel in value:
            _check_bytes(channel, BYTES_PER_CHANNEL, "waveform channel")
        return value

    @field_validator("aux_data")
    @classmethod
    def _validate_aux_data(cls, value: list[int]) -> list[int]:
        return _check_bytes(value, AUX_DATA_BYTES, "aux_data")

    @field_validator("checksum")
    @classmethod
    def _validate_checksum(cls, value: list[int]) -> list[int]:
        return _check_bytes(value, CHECKSUM_BYTES, "checksum")

    def channel(self, number: int) -> list[int]:
        """
        Get the packed bytes of one waveform channel.

        Args:
            number: Channel number, 1 or 2

        Returns:
            The channel's 5 packed bytes
        """
        if not 1 <= number <= WAVEFORM_CHANNELS:
            raise ValueError(f"Channel must be 1..{WAVEFORM_CHANNELS}, got {number}")
        return self.waveform_bytes[number - 1]

    @property
    def complement_matches(self) -> bool:
        """Whether the trailing byte is the one's complement of the sequence number.

        Informational only; never used to reject a block.
        """
        return self.sequence_complement == (~self.sequence_number & 0xFF)
