"""
Log Formatter Module - Turns raw database records into display lines

Handles:
- Log level identification (DEBUG, INFO, WARN, ERROR, FATAL)
- Locale independent timestamp rendering
- Composition of the single display line shown by the viewer
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from DBLOG.database.record_reader import LogRecord


class LogLevel(Enum):
    """Log severity levels"""
    NONE = "NONE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    FATAL = "FATAL"

    @property
    def color(self) -> str:
        """Get color representation for this log level"""
        colors = {
            LogLevel.DEBUG: "blue",
            LogLevel.INFO: "green",
            LogLevel.WARNING: "yellow",
            LogLevel.ERROR: "red",
            LogLevel.FATAL: "red bold",
            LogLevel.NONE: "white",
        }
        return colors.get(self, "white")


# Exact (case-insensitive) severity strings the store uses
SEVERITIES = {
    "DEBUG": LogLevel.DEBUG,
    "INFO": LogLevel.INFO,
    "WARN": LogLevel.WARNING,
    "ERROR": LogLevel.ERROR,
    "FATAL": LogLevel.FATAL,
}

TIMESTAMP_PLACEHOLDER = "-"


@dataclass(frozen=True)
class FormattedLine:
    """A record rendered for display"""
    ordinal: int
    text: str
    level: LogLevel
    timestamp: Optional[datetime]

    def __str__(self) -> str:
        return self.text


def parse_level(severity: Optional[str]) -> LogLevel:
    """Classify a severity string, anything unknown is LogLevel.NONE"""
    if not severity:
        return LogLevel.NONE
    return SEVERITIES.get(severity.upper(), LogLevel.NONE)


def format_timestamp(timestamp: Optional[datetime]) -> str:
    """Render as 'YYYY-MM-DD HH:MM:SS.fff' without consulting the locale"""
    if timestamp is None:
        return TIMESTAMP_PLACEHOLDER
    return (f"{timestamp.year:04d}-{timestamp.month:02d}-{timestamp.day:02d} "
            f"{timestamp.hour:02d}:{timestamp.minute:02d}:{timestamp.second:02d}."
            f"{timestamp.microsecond // 1000:03d}")


def format_record(record: LogRecord) -> FormattedLine:
    """
    Format one record

    Returns:
        FormattedLine whose text is "{timestamp} [{thread}] {logger} {severity} {message}"
    """
    text = (f"{format_timestamp(record.timestamp)} [{record.thread}] "
            f"{record.logger} {record.severity} {record.message}")
    return FormattedLine(
        ordinal=record.ordinal,
        text=text,
        level=parse_level(record.severity),
        timestamp=record.timestamp,
    )
