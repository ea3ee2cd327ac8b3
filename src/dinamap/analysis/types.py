"""Analysis pipeline type definitions."""

from pydantic import BaseModel, Field


class StatusEvents(BaseModel):
    """Events detected from a single block's status byte."""

    qrs: bool = Field(default=False, description="QRS bit group changed")
    breath: bool = Field(default=False, description="Breath bit group changed")
    warning_alarm: bool = Field(default=False, description="Warning alarm bit set")
    crisis_alarm: bool = Field(default=False, description="Crisis alarm bit set")

    @property
    def any(self) -> bool:
        return self.qrs or self.breath or self.warning_alarm or self.crisis_alarm


class EventCounters(BaseModel):
    """
    Running totals for one decoding session.

    All counts only ever increase. Rejected records never touch these
    counters; they are tallied separately on DecodingResult.
    """

    blocks_read: int = Field(default=0, ge=0, description="Blocks decoded")
    qrs_events: int = Field(default=0, ge=0, description="QRS events detected")
    breaths: int = Field(default=0, ge=0, description="Breaths detected")
    warning_alarms: int = Field(
        default=0, ge=0, description="Blocks with the warning alarm bit set"
    )
    crisis_alarms: int = Field(
        default=0, ge=0, description="Blocks with the crisis alarm bit set"
    )

    def summary_lines(self) -> list[str]:
        """Format the five session totals, one per line."""
        return [
            f"{self.blocks_read} blocks read",
            f"{self.qrs_events} QRS events detected",
            f"{self.breaths} breaths detected",
            f"{self.warning_alarms} warning alarms detected",
            f"{self.crisis_alarms} crisis alarms detected",
        ]


class DecodingResult(BaseModel):
    """Results from decoding one block stream."""

    source: str = Field(description="Input source name")
    counters: EventCounters = Field(description="Final session totals")
    samples_written: int = Field(ge=0, description="Waveform samples emitted")
    malformed_blocks: int = Field(
        default=0, ge=0, description="Records skipped as malformed"
    )
