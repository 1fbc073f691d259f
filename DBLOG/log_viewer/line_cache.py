"""
Line Cache Module - Thread-safe store of formatted lines

The sync engine is the only writer; any number of consumer threads read.
One lock guards every operation and is only held for the list mutation
or copy, never across disk I/O.
"""
import threading
from typing import Iterable, List, Optional

from DBLOG.config import RetentionPolicy
from DBLOG.errors import LineEvictedError, LineIndexError

from .log_formatter import FormattedLine


class LineCache:
    """Append/clear-only ordered collection of FormattedLine"""

    def __init__(self, retention: RetentionPolicy = RetentionPolicy.FULL,
                 max_lines: Optional[int] = None):
        """
        Initialize the cache

        Args:
            retention: FULL keeps every line, CAPPED keeps the newest max_lines
            max_lines: Upper bound on retained lines for CAPPED retention
        """
        if retention is RetentionPolicy.CAPPED and (max_lines is None or max_lines <= 0):
            raise ValueError("capped retention requires a positive max_lines")
        self.retention = retention
        self.max_lines = max_lines
        self._lines: List[FormattedLine] = []
        self._first_ordinal = 0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return self._first_ordinal + len(self._lines)

    @property
    def first_ordinal(self) -> int:
        """Oldest ordinal still held (always 0 with FULL retention)"""
        with self._lock:
            return self._first_ordinal

    def clear(self) -> None:
        with self._lock:
            self._lines.clear()
            self._first_ordinal = 0

    def append(self, lines: Iterable[FormattedLine]) -> None:
        """
        Append lines continuing the current ordinal sequence

        Raises:
            ValueError: If the ordinals do not continue contiguously
        """
        lines = list(lines)
        with self._lock:
            expected = self._first_ordinal + len(self._lines)
            for offset, line in enumerate(lines):
                if line.ordinal != expected + offset:
                    raise ValueError(
                        f"Expected ordinal {expected + offset}, got {line.ordinal}"
                    )
            self._lines.extend(lines)
            self._evict()

    def _evict(self) -> None:
        if self.retention is not RetentionPolicy.CAPPED:
            return
        excess = len(self._lines) - self.max_lines
        if excess > 0:
            del self._lines[:excess]
            self._first_ordinal += excess

    def read_at(self, ordinal: int) -> FormattedLine:
        """
        Get the line with the given ordinal

        Raises:
            LineIndexError: If ordinal is outside [0, len)
            LineEvictedError: If the line was dropped by capped retention
        """
        with self._lock:
            self._check_range(ordinal, 1)
            return self._lines[ordinal - self._first_ordinal]

    def read_range(self, start: int, count: int) -> List[FormattedLine]:
        """Copy `count` lines starting at ordinal `start` (same errors as read_at)"""
        if count < 0:
            raise LineIndexError(f"Negative line count: {count}")
        with self._lock:
            self._check_range(start, count)
            offset = start - self._first_ordinal
            return self._lines[offset:offset + count]

    def _check_range(self, start: int, count: int) -> None:
        total = self._first_ordinal + len(self._lines)
        if start < 0 or start + count > total:
            raise LineIndexError(
                f"Lines [{start}, {start + count}) requested but only {total} available"
            )
        if count and start < self._first_ordinal:
            raise LineEvictedError(
                f"Line {start} was evicted, oldest retained line is {self._first_ordinal}"
            )
