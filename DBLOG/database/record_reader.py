"""
Record Reader Module - Read-only access to a SQLite log database

Handles:
- Opening the database read-only, reporting a missing file as a status
- Counting the stored log records
- Lazily reading a contiguous range of records by ordinal
"""
import os
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional, Sequence

from DBLOG.config import DEFAULT_COLUMNS
from DBLOG.errors import RecordRangeError, StoreIOError

# Timestamps are stored as 100ns ticks since 0001-01-01 00:00:00
TICKS_PER_MICROSECOND = 10
TICKS_EPOCH = datetime(1, 1, 1)


def ticks_to_datetime(ticks) -> Optional[datetime]:
    """Convert a tick count into a datetime, None for NULL or out of range values"""
    if ticks is None or isinstance(ticks, bool) or not isinstance(ticks, int):
        return None
    try:
        return TICKS_EPOCH + timedelta(microseconds=ticks // TICKS_PER_MICROSECOND)
    except OverflowError:
        return None


def datetime_to_ticks(value: datetime) -> int:
    """Inverse of ticks_to_datetime (used when writing test databases)"""
    delta = value - TICKS_EPOCH
    micros = (delta.days * 86400 + delta.seconds) * 1_000_000 + delta.microseconds
    return micros * TICKS_PER_MICROSECOND


@dataclass(frozen=True)
class LogRecord:
    """One raw row of the log table"""
    ordinal: int
    timestamp: Optional[datetime]
    thread: str
    severity: str
    logger: str
    message: str


class OpenStatus(Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    # The file vanished between the existence check and the open call
    NOT_FOUND_TRANSIENT = "not_found_transient"


@dataclass
class OpenResult:
    status: OpenStatus
    reader: Optional["RecordReader"] = None


class RecordReader:
    """
    Read-only handle on a log database

    Use as a context manager so the connection is always closed:

        with result.reader as reader:
            total = reader.count()
    """

    def __init__(self, connection: sqlite3.Connection, table: str = "log",
                 columns: Sequence[str] = DEFAULT_COLUMNS):
        self.__conn = connection
        self.table = table
        self.columns = tuple(columns)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def close(self) -> None:
        self.__conn.close()

    def count(self) -> int:
        """
        Count the records in the log table

        Raises:
            StoreIOError: If sqlite cannot answer (locked, missing table, I/O, not a database)
        """
        try:
            cursor = self.__conn.execute(f"SELECT COUNT(*) FROM {self.table}")
            return cursor.fetchone()[0]
        except sqlite3.DatabaseError as e:
            raise StoreIOError(f"Unable to count records in {self.table}: {e}") from e

    def read_range(self, start: int, count: int) -> Iterator[LogRecord]:
        """
        Read `count` records starting at ordinal `start`, ascending

        The returned iterator is lazy: rows are fetched while iterating.
        It raises RecordRangeError once exhausted if the store held fewer
        than `count` records from `start` on, and StoreIOError on I/O failure.

        Args:
            start: First ordinal to read (0-based)
            count: Number of records to read
        """
        if start < 0 or count < 0:
            raise ValueError(f"Invalid range: start={start}, count={count}")
        return self._iter_range(start, count)

    def _iter_range(self, start: int, count: int) -> Iterator[LogRecord]:
        if count == 0:
            return

        sql = (f"SELECT {', '.join(self.columns)} FROM {self.table} "
               f"ORDER BY rowid LIMIT ? OFFSET ?")
        read = 0
        try:
            cursor = self.__conn.execute(sql, (count, start))
            for timestamp, thread, level, logger, message in cursor:
                yield LogRecord(
                    ordinal=start + read,
                    timestamp=ticks_to_datetime(timestamp),
                    thread=_text(thread),
                    severity=_text(level),
                    logger=_text(logger),
                    message=_text(message),
                )
                read += 1
        except sqlite3.DatabaseError as e:
            raise StoreIOError(f"Unable to read records from {self.table}: {e}") from e

        if read != count:
            raise RecordRangeError(
                f"Requested records [{start}, {start + count}) but only {read} were available"
            )


def _text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def open_database(path, table: str = "log",
                  columns: Sequence[str] = DEFAULT_COLUMNS) -> OpenResult:
    """
    Open a log database read-only

    Returns:
        OpenResult with status OK and a reader, NOT_FOUND if the path does not
        exist, or NOT_FOUND_TRANSIENT if it disappeared while being opened

    Raises:
        StoreIOError: If the file exists but sqlite refuses to open it
    """
    path = Path(path)
    if not path.is_file():
        return OpenResult(OpenStatus.NOT_FOUND)

    uri = path.resolve().as_uri() + "?mode=ro"
    try:
        connection = sqlite3.connect(uri, uri=True)
    except sqlite3.DatabaseError as e:
        if not os.path.exists(path):
            return OpenResult(OpenStatus.NOT_FOUND_TRANSIENT)
        raise StoreIOError(f"Unable to open {path}: {e}") from e

    return OpenResult(OpenStatus.OK, RecordReader(connection, table, columns))
