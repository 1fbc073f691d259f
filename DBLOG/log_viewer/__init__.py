"""
Log Viewer Package - Incremental view on a SQLite log database

Package Structure:
- sqlite_log_file: Sync engine and public read surface (SQLiteLogFile)
- line_cache: Thread-safe formatted line storage (LineCache)
- log_formatter: Record to display line conversion (format_record, LogLevel)
- listeners: Change notifications (LogFileListener, ListenerCollection)
- scheduler: Background periodic tasks (PeriodicTaskScheduler)
"""
from .line_cache import LineCache
from .listeners import ListenerCollection, LogFileListener
from .log_formatter import FormattedLine, LogLevel, format_record, parse_level
from .scheduler import PeriodicTask, PeriodicTaskScheduler
from .sqlite_log_file import SQLiteLogFile, SyncState

__all__ = [
    'SQLiteLogFile',
    'SyncState',
    'LineCache',
    'ListenerCollection',
    'LogFileListener',
    'FormattedLine',
    'LogLevel',
    'format_record',
    'parse_level',
    'PeriodicTask',
    'PeriodicTaskScheduler',
]
