"""
DBLOG UI Package
"""
from .app import DBLogApp
from .log_table import LogLinesTable, TableListener


def run_app(log_file) -> None:
    """Entry point to run the viewer for an already opened log file"""
    app = DBLogApp(log_file)
    app.run()


__all__ = ['DBLogApp', 'LogLinesTable', 'TableListener', 'run_app']
