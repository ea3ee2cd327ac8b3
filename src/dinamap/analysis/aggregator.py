"""Per-session event totals."""

from dinamap.analysis.types import EventCounters, StatusEvents


class Aggregator:
    """
    Accumulate EventCounters across one block stream.

    Skipped records are tallied in malformed_blocks, outside the counters.
    """

    def __init__(self) -> None:
        self.counters = EventCounters()
        self.malformed_blocks = 0

    def record_block(self, events: StatusEvents) -> None:
        """Count one successfully decoded block and its detected events."""
        c = self.counters
        c.blocks_read += 1
        if events.qrs:
            c.qrs_events += 1
        if events.breath:
            c.breaths += 1
        if events.warning_alarm:
            c.warning_alarms += 1
        if events.crisis_alarm:
            c.crisis_alarms += 1

    def record_malformed(self, count: int = 1) -> None:
        """Count records skipped as malformed."""
        self.malformed_blocks += count
