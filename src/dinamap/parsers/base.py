"""
Decoder Error Types

Recoverable errors (MalformedRecordError and its subclass FieldDecodeError)
cause a single block to be skipped; the stream keeps going. SourceReadError
and SinkWriteError are fatal and abort the decoding session.
"""


class DinamapError(Exception):
    """Base exception for block decoding errors."""


class MalformedRecordError(DinamapError):
    """A record that cannot be decoded as a block."""

    def __init__(self, message: str, record: str | None = None):
        super().__init__(message)
        self.record = record


class FieldDecodeError(MalformedRecordError):
    """A 2-character hex slice of a block failed to parse."""

    def __init__(self, field: str, offset: int, text: str, record: str | None = None):
        super().__init__(
            f"Invalid hex byte {text!r} for {field} at offset {offset}", record
        )
        self.field = field
        self.offset = offset
        self.text = text


class SourceReadError(DinamapError):
    """The input source failed while reading records."""


class SinkWriteError(DinamapError):
    """A waveform or summary sink failed to accept output."""
