from datetime import datetime

import pytest

from DBLOG.database.record_reader import LogRecord
from DBLOG.log_viewer.log_formatter import (
    LogLevel,
    format_record,
    format_timestamp,
    parse_level,
)


def record(severity="INFO", timestamp=datetime(2024, 1, 2, 3, 4, 5, 678900), ordinal=7):
    return LogRecord(
        ordinal=ordinal,
        timestamp=timestamp,
        thread="main",
        severity=severity,
        logger="app.db",
        message="hello world",
    )


class TestParseLevel:
    @pytest.mark.parametrize("severity,expected", [
        ("DEBUG", LogLevel.DEBUG),
        ("info", LogLevel.INFO),
        ("Warn", LogLevel.WARNING),
        ("error", LogLevel.ERROR),
        ("FATAL", LogLevel.FATAL),
    ])
    def test_known_severities_case_insensitive(self, severity, expected):
        assert parse_level(severity) is expected

    @pytest.mark.parametrize("severity", ["", None, "WARNING", "CRITICAL", " INFO", "trace", "ERR"])
    def test_unknown_severities_are_none(self, severity):
        assert parse_level(severity) is LogLevel.NONE

    def test_every_level_has_a_color(self):
        for level in LogLevel:
            assert level.color


class TestFormatRecord:
    def test_display_text_layout(self):
        line = format_record(record())
        assert line.text == "2024-01-02 03:04:05.678 [main] app.db INFO hello world"

    def test_severity_kept_as_stored(self):
        line = format_record(record(severity="warn"))
        assert line.text == "2024-01-02 03:04:05.678 [main] app.db warn hello world"
        assert line.level is LogLevel.WARNING

    def test_carries_ordinal_and_timestamp(self):
        rec = record()
        line = format_record(rec)
        assert line.ordinal == 7
        assert line.timestamp == rec.timestamp
        assert str(line) == line.text

    def test_missing_timestamp_placeholder(self):
        assert format_record(record(timestamp=None)).text.startswith("- [main]")

    def test_deterministic(self):
        assert format_record(record()) == format_record(record())

    def test_timestamp_pads_small_years(self):
        assert format_timestamp(datetime(1, 1, 1)) == "0001-01-01 00:00:00.000"
