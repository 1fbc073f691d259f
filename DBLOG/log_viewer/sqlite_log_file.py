"""
SQLite Log File Module - Incremental synchronization of a log database

Handles:
- Polling the database on a background task (one tick at a time)
- Detecting appended records, rewritten (shrunk) databases and missing files
- Reading and formatting only the records added since the last tick
- Publishing lines through the thread-safe LineCache and notifying listeners

Consumers (e.g. the UI thread) only ever touch the LineCache and plain
attributes; all disk I/O happens inside run_once().
"""
import logging
import os
import threading
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

from DBLOG.config import Settings
from DBLOG.database.record_reader import LogRecord, OpenStatus, RecordReader, open_database
from DBLOG.errors import StoreIOError
from DBLOG.sysmon.file_watch import DatabaseWatcher

from .line_cache import LineCache
from .listeners import ListenerCollection, LogFileListener
from .log_formatter import FormattedLine, format_record
from .scheduler import PeriodicTask, PeriodicTaskScheduler

logger = logging.getLogger(__name__)

NEVER_MODIFIED = datetime.min


@dataclass
class SyncState:
    """What the last completed tick observed; only ticks mutate it"""
    last_count: int = 0
    exists: bool = False
    size: int = 0
    start_timestamp: Optional[datetime] = None
    last_modified: datetime = NEVER_MODIFIED
    max_line_length: int = 0


@dataclass
class _Delta:
    """Outcome of reading the store, applied to the state in one go"""
    count: int
    is_reset: bool
    lines: List[FormattedLine]
    size: int
    last_modified: datetime


class SQLiteLogFile:
    """
    A log file backed by a SQLite database

    The constructor returns immediately; the database is first opened by
    the first tick on the scheduler's thread.
    """

    def __init__(self, file_name, scheduler: Optional[PeriodicTaskScheduler] = None,
                 settings: Optional[Settings] = None,
                 formatter: Callable[[LogRecord], FormattedLine] = format_record):
        """
        Initialize the watch

        Args:
            file_name: Path of the database to watch
            scheduler: Runs run_once() periodically; None means the owner ticks manually
            settings: Poll interval, table layout, retention...
            formatter: Maps a LogRecord to a FormattedLine
        """
        if file_name is None:
            raise ValueError("file_name must not be None")

        self.file_name = Path(file_name)
        self.settings = settings or Settings()
        self.formatter = formatter
        self.state = SyncState()
        self.lines = LineCache(self.settings.retention, self.settings.max_lines)
        self.listeners = ListenerCollection()
        self.disposed = False
        # Tick commits, disposal and initial listener notifications are serialized
        self._commit_lock = threading.RLock()

        self._scheduler = scheduler
        self._task: Optional[PeriodicTask] = None
        self._watcher: Optional[DatabaseWatcher] = None

        if scheduler is not None:
            self._task = scheduler.start_periodic(self.run_once, name=f"sqlite-log:{self.file_name.name}")
            if self.settings.watch_filesystem:
                self._watcher = DatabaseWatcher(self.file_name, self._on_file_event)
                self._watcher.start()

    # Public read surface, safe to call from any thread

    @property
    def exists(self) -> bool:
        return self.state.exists

    @property
    def size(self) -> int:
        """Size of the database file in bytes"""
        return self.state.size

    @property
    def count(self) -> int:
        return len(self.lines)

    @property
    def max_characters_per_line(self) -> int:
        return self.state.max_line_length

    @property
    def start_timestamp(self) -> Optional[datetime]:
        return self.state.start_timestamp

    @property
    def last_modified(self) -> datetime:
        return self.state.last_modified

    def read_at(self, ordinal: int) -> FormattedLine:
        return self.lines.read_at(ordinal)

    def read_range(self, start: int, count: int) -> List[FormattedLine]:
        return self.lines.read_range(start, count)

    def add_listener(self, listener: LogFileListener) -> None:
        """Register a listener; it is told right away about lines already available"""
        with self._commit_lock:
            self.listeners.add(listener)
            total = len(self.lines)
            if total:
                listener.lines_available(total)

    def remove_listener(self, listener: LogFileListener) -> None:
        self.listeners.remove(listener)

    def dispose(self) -> None:
        """Stop polling; a tick in progress finishes, no further tick is run"""
        with self._commit_lock:
            self.disposed = True
            self.lines.clear()
        if self._watcher is not None:
            self._watcher.stop()
            self._watcher = None
        if self._task is not None:
            self._scheduler.stop_periodic(self._task)
            self._task = None

    # Background task

    def run_once(self) -> float:
        """
        Execute one tick

        Returns:
            Seconds until the next tick should run
        """
        if self.disposed:
            return self.settings.poll_interval

        try:
            self._tick()
        except Exception:
            # Escaping exceptions would end up in the scheduler, handle them here
            logger.exception("Caught unexpected exception while synchronizing %s", self.file_name)
        return self.settings.poll_interval

    def _tick(self) -> None:
        try:
            result = open_database(self.file_name, self.settings.table, self.settings.columns)
            if result.status is OpenStatus.OK:
                with result.reader as reader:
                    delta = self._read_delta(reader)
        except (StoreIOError, FileNotFoundError) as e:
            logger.debug("Caught exception while reading the database: %s", e)
            with self._commit_lock:
                if not self.disposed:
                    self.state.exists = False
            return

        if result.status is OpenStatus.NOT_FOUND_TRANSIENT:
            # Deleted between the existence check and the open, next tick sorts it out
            logger.debug("%s disappeared while being opened", self.file_name)
        if result.status is not OpenStatus.OK:
            self._set_not_existing()
            return

        self._apply(delta)

    def _read_delta(self, reader: RecordReader) -> _Delta:
        stat = os.stat(self.file_name)
        current = reader.count()
        last = self.state.last_count

        is_reset = current < last
        start = 0 if is_reset else last
        lines = [self.formatter(record) for record in reader.read_range(start, current - start)]
        for expected, line in enumerate(lines, start=start):
            if line.ordinal != expected:
                raise ValueError(f"Formatter returned ordinal {line.ordinal}, expected {expected}")
        return _Delta(
            count=current,
            is_reset=is_reset,
            lines=lines,
            size=stat.st_size,
            last_modified=datetime.fromtimestamp(stat.st_mtime),
        )

    def _apply(self, delta: _Delta) -> None:
        with self._commit_lock:
            if self.disposed:
                return
            state = self.state
            state.exists = True
            state.size = delta.size
            state.last_modified = delta.last_modified

            if delta.is_reset:
                logger.info("%s shrank from %d to %d records, reloading",
                            self.file_name, state.last_count, delta.count)
                self.lines.clear()
                state.last_count = 0
                state.start_timestamp = None
                state.max_line_length = 0
                self.listeners.reset()
                # A listener may have disposed the watch while handling the reset
                if self.disposed:
                    return
            elif delta.count == state.last_count:
                return

            if state.last_count == 0 and delta.lines:
                state.start_timestamp = delta.lines[0].timestamp
            if delta.lines:
                state.max_line_length = max(state.max_line_length,
                                            max(len(line.text) for line in delta.lines))

            self.lines.append(delta.lines)
            state.last_count = delta.count
            self.listeners.lines_available(delta.count)

    def _set_not_existing(self) -> None:
        with self._commit_lock:
            if self.disposed:
                return
            state = self.state
            had_content = state.exists or state.last_count > 0
            self.lines.clear()
            state.last_count = 0
            state.exists = False
            state.size = 0
            state.start_timestamp = None
            state.last_modified = NEVER_MODIFIED
            state.max_line_length = 0
            if had_content:
                self.listeners.reset()

    def _on_file_event(self, event_type: str, path: str) -> None:
        logger.debug("%s %s, polling early", path, event_type)
        if self._task is not None:
            self._task.wake()
