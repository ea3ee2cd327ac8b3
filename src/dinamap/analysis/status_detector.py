"""
Waveform status event detection.

QRS and breath events are edge-triggered: any change inside their 2-bit
status group counts once, whichever bits changed. Alarms are
level-triggered: every block with the alarm bit set counts, so alarm totals
track alarm duration rather than onsets.
"""

import logging

from dataclasses import dataclass
from enum import Enum

from dinamap.analysis.types import StatusEvents
from dinamap.constants import StatusMasks

logger = logging.getLogger(__name__)


class DetectorPhase(str, Enum):
    """Detector lifecycle. TRACKING is permanent once entered."""

    UNINITIALIZED = "uninitialized"
    TRACKING = "tracking"


@dataclass(frozen=True)
class DetectorState:
    """Status history carried from one block to the next."""

    phase: DetectorPhase = DetectorPhase.UNINITIALIZED
    previous_status: int | None = None

    @classmethod
    def tracking(cls, previous_status: int) -> "DetectorState":
        return cls(DetectorPhase.TRACKING, previous_status)


class StatusEventDetector:
    """
    Detect QRS, breath and alarm events from consecutive status bytes.

    The first status byte only primes the detector and reports nothing, not
    even alarms. Each detector belongs to one block stream; use a fresh
    instance (or reset()) for a new stream.

    Example:
        >>> detector = StatusEventDetector()
        >>> detector.observe(0x00).any
        False
        >>> detector.observe(0x06).qrs
        True
    """

    def __init__(self) -> None:
        self.state = DetectorState()

    def reset(self) -> None:
        """Forget all status history."""
        self.state = DetectorState()

    def observe(self, status: int) -> StatusEvents:
        """
        Process the status byte of the next block.

        Args:
            status: Waveform status byte (0..255)

        Returns:
            Events detected for this block
        """
        status &= 0xFF

        if self.state.phase == DetectorPhase.UNINITIALIZED:
            self.state = DetectorState.tracking(status)
            return StatusEvents()

        previous = self.state.previous_status
        assert previous is not None

        events = StatusEvents(
            qrs=(status & StatusMasks.QRS) != (previous & StatusMasks.QRS),
            breath=(status & StatusMasks.BREATH) != (previous & StatusMasks.BREATH),
            warning_alarm=bool(status & StatusMasks.WARNING_ALARM),
            crisis_alarm=bool(status & StatusMasks.CRISIS_ALARM),
        )

        self.state = DetectorState.tracking(status)
        return events
