"""
Tests for the terminal viewer
"""
import asyncio

from DBLOG.UI.app import DBLogApp
from DBLOG.UI.log_table import LogLinesTable, TableListener
from DBLOG.log_viewer.sqlite_log_file import SQLiteLogFile
from conftest import append_rows, create_database, make_rows, rewrite_database


class TestTableListener:
    def test_drain_reports_latest_total(self):
        listener = TableListener()
        listener.lines_available(3)
        listener.lines_available(5)
        assert listener.drain() == (False, 5)

    def test_reset_reported_once(self):
        listener = TableListener()
        listener.lines_available(5)
        listener.reset()
        listener.lines_available(2)
        assert listener.drain() == (True, 2)
        assert listener.drain() == (False, 2)


class TestDBLogApp:
    def test_shows_lines_and_follows_changes(self, db_path):
        create_database(db_path, make_rows(["DEBUG", "INFO", "ERROR"]))
        log_file = SQLiteLogFile(db_path)
        log_file.run_once()

        async def scenario():
            app = DBLogApp(log_file)
            async with app.run_test() as pilot:
                await pilot.pause()
                app.refresh_lines()
                table = app.query_one("#log-lines-table", LogLinesTable)
                assert table.row_count == 3

                append_rows(db_path, make_rows(["WARN"] * 2, start=3))
                log_file.run_once()
                app.refresh_lines()
                assert table.row_count == 5
                assert table.shown_count == 5

                rewrite_database(db_path, make_rows(["FATAL"]))
                log_file.run_once()
                app.refresh_lines()
                assert table.row_count == 1
                assert table.get_row_at(0)[0] == "0"

        try:
            asyncio.run(scenario())
        finally:
            log_file.dispose()
