"""
Error types raised by the DBLOG adapter

A missing database file is not an error: it is reported through
OpenStatus.NOT_FOUND by the record reader.
"""


class DBLogError(Exception):
    """Base class for all DBLOG errors"""


class StoreIOError(DBLogError):
    """Reading the database failed (locked, vanished, corrupt page...)"""


class RecordRangeError(DBLogError):
    """A range read asked for more records than the store holds"""


class LineIndexError(DBLogError, IndexError):
    """A consumer asked for a line outside of the cached range"""


class LineEvictedError(LineIndexError):
    """The requested line was dropped by a capped retention policy"""


class ConfigError(DBLogError):
    """Invalid configuration value"""
