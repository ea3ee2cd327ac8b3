"""
dinamap: Dinamap Pro 1000 binary block reader

Decodes ASCII-hex telemetry blocks into waveform samples, QRS and breath
events, and alarm counts.
"""

from typing import Any

__all__ = ["DecodingService"]


def __getattr__(name: str) -> Any:
    """Lazy load the decoding service to keep CLI startup light."""
    if name == "DecodingService":
        from dinamap.analysis.service import DecodingService

        return DecodingService
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
