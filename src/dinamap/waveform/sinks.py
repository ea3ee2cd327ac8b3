"""
Output sinks for decoded waveform samples and alarm alerts.

Any OSError raised while writing samples surfaces as SinkWriteError.
"""

import logging

from collections.abc import Sequence
from typing import Protocol, TextIO

import numpy as np

from dinamap.constants import AlarmLevel
from dinamap.parsers.base import SinkWriteError

logger = logging.getLogger(__name__)


class WaveformSink(Protocol):
    """Receives samples in emission order, four per block."""

    def write(self, samples: Sequence[int]) -> None: ...


class AlertSink(Protocol):
    """Receives one notification per block with an alarm bit set."""

    def alert(self, level: AlarmLevel, block_index: int, status: int) -> None: ...


class MemoryWaveformSink:
    """Collect samples in memory."""

    def __init__(self) -> None:
        self.samples: list[int] = []

    def write(self, samples: Sequence[int]) -> None:
        self.samples.extend(samples)

    def to_array(self) -> np.ndarray:
        """Return collected samples as a signed 16-bit array."""
        return np.asarray(self.samples, dtype=np.int16)

    def __len__(self) -> int:
        return len(self.samples)


class FileWaveformSink:
    """Write samples to a text stream, one decimal integer per line."""

    def __init__(self, stream: TextIO):
        self.stream = stream
        self.count = 0

    def write(self, samples: Sequence[int]) -> None:
        try:
            self.stream.writelines(f"{int(s)}\n" for s in samples)
        except OSError as e:
            raise SinkWriteError(
                f"Failed writing waveform samples after {self.count}: {e}"
            ) from e
        self.count += len(samples)


class NullWaveformSink:
    """Discard samples."""

    def write(self, samples: Sequence[int]) -> None:
        pass


class LoggingAlertSink:
    """Report alarms through the logging system."""

    def __init__(self, log: logging.Logger | None = None):
        self.log = log or logger

    def alert(self, level: AlarmLevel, block_index: int, status: int) -> None:
        if level == AlarmLevel.CRISIS:
            self.log.critical(
                f"CRISIS ALARM DETECTED! (block {block_index}, status 0x{status:02x})"
            )
        else:
            self.log.warning(
                f"warning alarm detected! (block {block_index}, status 0x{status:02x})"
            )


class TeeWaveformSink:
    """Forward samples to several sinks in order."""

    def __init__(self, *sinks: WaveformSink):
        self.sinks = sinks

    def write(self, samples: Sequence[int]) -> None:
        for sink in self.sinks:
            sink.write(samples)
