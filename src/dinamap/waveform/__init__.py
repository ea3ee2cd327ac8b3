"""Waveform output sinks and visualization utilities."""

from .renderer import AsciiWaveformRenderer
from .sinks import (
    FileWaveformSink,
    LoggingAlertSink,
    MemoryWaveformSink,
    NullWaveformSink,
    TeeWaveformSink,
)

__all__ = [
    "AsciiWaveformRenderer",
    "FileWaveformSink",
    "LoggingAlertSink",
    "MemoryWaveformSink",
    "NullWaveformSink",
    "TeeWaveformSink",
]
