import sqlite3
from datetime import datetime, timedelta

import pytest

from DBLOG.database.record_reader import datetime_to_ticks

BASE_TIME = datetime(2024, 1, 2, 3, 4, 5, 678000)


def make_rows(severities, start=0):
    """Rows for the log table, one per severity, with distinct messages"""
    rows = []
    for i, severity in enumerate(severities, start=start):
        rows.append((
            datetime_to_ticks(BASE_TIME + timedelta(seconds=i)),
            f"thread-{i % 3}",
            severity,
            "app.module",
            f"message {i}",
        ))
    return rows


def create_database(path, rows=()):
    conn = sqlite3.connect(path)
    try:
        conn.execute(
            "CREATE TABLE IF NOT EXISTS log ("
            "timestamp INTEGER, thread TEXT, level TEXT, logger TEXT, message TEXT)"
        )
        conn.executemany("INSERT INTO log VALUES (?, ?, ?, ?, ?)", rows)
        conn.commit()
    finally:
        conn.close()


def append_rows(path, rows):
    create_database(path, rows)


def rewrite_database(path, rows):
    conn = sqlite3.connect(path)
    try:
        conn.execute("DELETE FROM log")
        conn.executemany("INSERT INTO log VALUES (?, ?, ?, ?, ?)", rows)
        conn.commit()
    finally:
        conn.close()


class RecordingListener:
    """Keeps every notification in order"""

    def __init__(self):
        self.events = []

    def reset(self):
        self.events.append(("reset",))

    def lines_available(self, total):
        self.events.append(("lines", total))


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "app.db"


@pytest.fixture
def listener():
    return RecordingListener()
