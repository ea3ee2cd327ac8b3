"""
Decoding service for Dinamap block streams.

This module provides the main interface for decoding a stream of blocks:
it feeds records through the field decoder, waveform unpacker and status
detector in arrival order and keeps the session totals.
"""

import logging

from collections.abc import Iterable
from pathlib import Path

from dinamap.analysis.aggregator import Aggregator
from dinamap.analysis.status_detector import StatusEventDetector
from dinamap.analysis.types import DecodingResult, EventCounters
from dinamap.analysis.waveform_unpacker import WaveformUnpacker
from dinamap.config import DecoderSettings
from dinamap.constants import BLOCK_DUMP_LOGGER, AlarmLevel
from dinamap.parsers.base import MalformedRecordError
from dinamap.parsers.block_reader import BlockReader
from dinamap.parsers.field_decoder import FieldDecoder
from dinamap.parsers.types import DecodedBlock
from dinamap.waveform.sinks import (
    AlertSink,
    LoggingAlertSink,
    NullWaveformSink,
    WaveformSink,
)

logger = logging.getLogger(__name__)
dump_logger = logging.getLogger(BLOCK_DUMP_LOGGER)

__all__ = ["DecodingService", "DecodingResult"]


class DecodingService:
    """
    Decode one block stream.

    This service handles:
    - Skipping malformed records (too short, or bad hex under STRICT policy)
    - Unpacking one waveform channel per block into the waveform sink
    - Detecting QRS, breath and alarm events from status transitions
    - Keeping the session totals

    A service instance holds the detector state and counters of a single
    stream; state is never rolled back, so use a new instance per stream.

    Example:
        >>> service = DecodingService(waveform_sink=MemoryWaveformSink())
        >>> result = service.decode_file("session.txt")
        >>> print(result.counters.qrs_events)
    """

    def __init__(
        self,
        settings: DecoderSettings | None = None,
        waveform_sink: WaveformSink | None = None,
        alert_sink: AlertSink | None = None,
        debug: int = 0,
    ):
        """
        Initialize decoding service.

        Args:
            settings: Decoder settings (default: built-in defaults)
            waveform_sink: Receives unpacked samples (default: discard)
            alert_sink: Receives alarm notifications (default: log them)
            debug: Debug level; above 0 every decoded block is dumped to the
                block dump logger
        """
        self.settings = settings if settings is not None else DecoderSettings()
        self.waveform_sink = (
            waveform_sink if waveform_sink is not None else NullWaveformSink()
        )
        self.alert_sink = alert_sink if alert_sink is not None else LoggingAlertSink()
        self.debug = debug

        self.decoder = FieldDecoder(self.settings.policy)
        self.unpacker = WaveformUnpacker(self.settings.channel)
        self.detector = StatusEventDetector()
        self.aggregator = Aggregator()
        self.samples_written = 0

    @property
    def counters(self) -> EventCounters:
        return self.aggregator.counters

    def process_record(self, record: str) -> DecodedBlock | None:
        """
        Decode one validated record and update all session state.

        The block is decoded in full before the detector sees it, so a
        rejected block leaves detector state and counters untouched.

        Args:
            record: Block text with the line terminator removed

        Returns:
            The decoded block, or None if it was skipped as malformed

        Raises:
            SinkWriteError: If the waveform sink fails
        """
        try:
            block = self.decoder.decode(record)
        except MalformedRecordError as e:
            logger.warning(f"Ignoring malformed block: {e}")
            self.aggregator.record_malformed()
            return None

        events = self.detector.observe(block.status)
        block_index = self.counters.blocks_read

        if events.warning_alarm:
            self.alert_sink.alert(AlarmLevel.WARNING, block_index, block.status)
        if events.crisis_alarm:
            self.alert_sink.alert(AlarmLevel.CRISIS, block_index, block.status)

        samples = self.unpacker.unpack(block)
        self.waveform_sink.write(samples)
        self.samples_written += len(samples)

        self.aggregator.record_block(events)

        if self.debug > 0:
            self._dump_block(block, samples)

        return block

    def decode_records(
        self, records: Iterable[str], source: str = "<stream>"
    ) -> DecodingResult:
        """
        Decode every record of a line source.

        Args:
            records: Text lines, one block per line
            source: Name of the source for reporting

        Returns:
            DecodingResult with the final session totals

        Raises:
            SourceReadError: If reading the source fails
            SinkWriteError: If the waveform sink fails
        """
        reader = BlockReader(records, min_length=self.settings.min_block_length)
        for record in reader:
            self.process_record(record)
        self.aggregator.record_malformed(reader.malformed_count)

        return self._finish(source)

    def decode_file(self, path: str | Path) -> DecodingResult:
        """
        Decode a block file.

        Args:
            path: Path to a text file with one block per line

        Returns:
            DecodingResult with the final session totals

        Raises:
            SourceReadError: If the file cannot be opened or read
            SinkWriteError: If the waveform sink fails
        """
        logger.info(f"Decoding {path}")
        with BlockReader.open(path, min_length=self.settings.min_block_length) as reader:
            for record in reader:
                self.process_record(record)
            self.aggregator.record_malformed(reader.malformed_count)

        return self._finish(str(path))

    def _finish(self, source: str) -> DecodingResult:
        for line in self.counters.summary_lines():
            logger.debug(line)
        if self.aggregator.malformed_blocks:
            logger.debug(f"{self.aggregator.malformed_blocks} malformed blocks ignored")

        return DecodingResult(
            source=source,
            counters=self.counters.model_copy(),
            samples_written=self.samples_written,
            malformed_blocks=self.aggregator.malformed_blocks,
        )

    def _dump_block(self, block: DecodedBlock, samples: list[int]) -> None:
        dump_logger.debug(f"block {self.counters.blocks_read}:")
        dump_logger.debug(f"  sequence_number: {block.sequence_number:02x}")
        dump_logger.debug(f"  status: {block.status:02x}")
        for ch, channel_bytes in enumerate(block.waveform_bytes, start=1):
            dump_logger.debug(
                f"  waveform channel {ch}: {' '.join(f'{b:02x}' for b in channel_bytes)}"
            )
        dump_logger.debug(f"  aux_data: {' '.join(f'{b:02x}' for b in block.aux_data)}")
        dump_logger.debug(f"  samples: {samples}")
        dump_logger.debug(f"  checksum: {block.checksum[0]:02x} {block.checksum[1]:02x}")
        dump_logger.debug(
            f"  sequence_complement: {block.sequence_complement:02x}"
            f"{'' if block.complement_matches else ' (mismatch)'}"
        )
