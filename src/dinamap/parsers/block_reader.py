"""
Block Reader

Pulls text records (one block per line) from an input source and drops the
ones too short to hold every fixed-offset field.
"""

import logging

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path

from dinamap.constants import MIN_BLOCK_LENGTH
from dinamap.parsers.base import SourceReadError

logger = logging.getLogger(__name__)


class BlockReader:
    """
    Iterate validated block records from a line source.

    The source is consumed lazily and only once. Short records are skipped
    with a warning; read faults from the source are raised as
    SourceReadError.

    Example:
        >>> with BlockReader.open("session.txt") as reader:
        ...     for record in reader:
        ...         block = decoder.decode(record)
    """

    def __init__(self, source: Iterable[str], min_length: int = MIN_BLOCK_LENGTH):
        """
        Initialize block reader.

        Args:
            source: Iterable of text lines (open file, list, generator)
            min_length: Minimum record length in characters, line terminator excluded
        """
        self.source = source
        self.min_length = min_length
        self.records_seen = 0
        self.malformed_count = 0

    @classmethod
    @contextmanager
    def open(
        cls, path: str | Path, min_length: int = MIN_BLOCK_LENGTH
    ) -> Iterator["BlockReader"]:
        """
        Open a block file for reading.

        Args:
            path: Path to a text file with one block per line
            min_length: Minimum record length in characters

        Yields:
            BlockReader over the file's lines

        Raises:
            SourceReadError: If the file cannot be opened or closed
        """
        try:
            f = open(path, encoding="ascii", errors="replace")
        except OSError as e:
            raise SourceReadError(f"Cannot open {path}: {e}") from e

        try:
            yield cls(f, min_length=min_length)
        finally:
            try:
                f.close()
            except OSError as e:
                raise SourceReadError(f"Cannot close {path}: {e}") from e

    def is_valid(self, record: str) -> bool:
        """Check whether a record is long enough to hold a full block."""
        return len(record) >= self.min_length

    def __iter__(self) -> Iterator[str]:
        lines = iter(self.source)
        while True:
            try:
                line = next(lines)
            except StopIteration:
                return
            except (OSError, UnicodeDecodeError) as e:
                raise SourceReadError(
                    f"Read failed after {self.records_seen} records: {e}"
                ) from e

            self.records_seen += 1
            record = line.rstrip("\r\n")

            if not self.is_valid(record):
                self.malformed_count += 1
                logger.warning(
                    f"Ignoring malformed block {self.records_seen}: "
                    f"{len(record)} characters (minimum {self.min_length})"
                )
                continue

            yield record
