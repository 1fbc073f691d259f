"""
Log Table Module - DataTable showing the lines of a SQLite log file

Handles:
- Collecting reset / lines-available notifications from the sync thread
- Pulling new lines from the line cache on the UI thread
- Color-coded log levels
"""
import threading
from typing import Tuple

from rich.text import Text
from textual.widgets import DataTable

from DBLOG.errors import LineIndexError
from DBLOG.log_viewer.log_formatter import FormattedLine
from DBLOG.log_viewer.sqlite_log_file import SQLiteLogFile


class TableListener:
    """
    Listener that only records what happened

    Notifications arrive on the sync thread; the table drains them
    from the UI thread.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._pending_reset = False
        self._available = 0

    def reset(self) -> None:
        with self._lock:
            self._pending_reset = True
            self._available = 0

    def lines_available(self, total: int) -> None:
        with self._lock:
            self._available = total

    def drain(self) -> Tuple[bool, int]:
        """Return (reset happened, lines available) and forget the reset"""
        with self._lock:
            reset, self._pending_reset = self._pending_reset, False
            return reset, self._available


class LogLinesTable(DataTable):
    """DataTable displaying formatted log lines"""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.shown_count = 0
        self.follow_tail = True

    def on_mount(self) -> None:
        """Initialize table columns when mounted"""
        self.cursor_type = "row"
        self.zebra_stripes = True
        self.add_columns("#", "Level", "Line")

    def sync_with(self, log_file: SQLiteLogFile, listener: TableListener) -> int:
        """
        Bring the table up to date with the log file

        Returns:
            Number of rows added
        """
        reset, total = listener.drain()
        if reset:
            self.clear()
            self.shown_count = 0

        if total <= self.shown_count:
            return 0

        start = max(self.shown_count, log_file.lines.first_ordinal)
        try:
            lines = log_file.read_range(start, total - start)
        except LineIndexError:
            # The file shrank after drain(), the pending reset is handled next time
            return 0

        for line in lines:
            self.add_row(*self._format_line(line), key=str(line.ordinal))
        self.shown_count = total

        if self.follow_tail and self.row_count:
            self.move_cursor(row=self.row_count - 1)
        return len(lines)

    def _format_line(self, line: FormattedLine) -> tuple:
        level_text = Text(line.level.value, style=line.level.color)
        return (str(line.ordinal), level_text, line.text)
