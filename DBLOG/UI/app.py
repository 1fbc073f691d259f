"""
DBLOG Application - Terminal viewer for a SQLite log database
"""
from textual.app import App, ComposeResult
from textual.widgets import Footer, Header, Label

from DBLOG.log_viewer.sqlite_log_file import SQLiteLogFile
from DBLOG.UI.log_table import LogLinesTable, TableListener

REFRESH_INTERVAL = 0.25


class DBLogApp(App):
    """Shows the lines of one log database as they arrive"""

    TITLE = "DBLOG - SQLite Log Viewer"

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("t", "jump_top", "Top"),
        ("b", "jump_bottom", "Bottom"),
    ]

    def __init__(self, log_file: SQLiteLogFile, **kwargs):
        super().__init__(**kwargs)
        self.log_file = log_file
        self.listener = TableListener()

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield Label("", id="log-status")
        yield LogLinesTable(id="log-lines-table")
        yield Footer()

    def on_mount(self) -> None:
        self.log_file.add_listener(self.listener)
        # The table adds its columns in its own on_mount
        self.call_after_refresh(self.refresh_lines)
        self.set_interval(REFRESH_INTERVAL, self.refresh_lines)

    def on_unmount(self) -> None:
        self.log_file.remove_listener(self.listener)

    def refresh_lines(self) -> None:
        """Runs on the UI thread; only reads from the line cache"""
        table = self.query_one("#log-lines-table", LogLinesTable)
        table.sync_with(self.log_file, self.listener)
        self.query_one("#log-status", Label).update(self._status_text())

    def _status_text(self) -> str:
        log_file = self.log_file
        if not log_file.exists:
            return f"{log_file.file_name}: waiting for the file to appear"
        return (f"{log_file.file_name}: {log_file.count} lines, "
                f"{log_file.size} bytes, last modified {log_file.last_modified:%Y-%m-%d %H:%M:%S}")

    def action_jump_top(self) -> None:
        table = self.query_one("#log-lines-table", LogLinesTable)
        table.follow_tail = False
        if table.row_count > 0:
            table.move_cursor(row=0)

    def action_jump_bottom(self) -> None:
        table = self.query_one("#log-lines-table", LogLinesTable)
        table.follow_tail = True
        if table.row_count > 0:
            table.move_cursor(row=table.row_count - 1)
