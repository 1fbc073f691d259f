#!/usr/bin/env python3
"""
DBLOG - Main Entry Point
Watch a SQLite log database and show its lines in the terminal
"""
import sys

from DBLOG.config import load_settings
from DBLOG.errors import ConfigError
from DBLOG.log_config import configure_logging
from DBLOG.log_viewer.scheduler import PeriodicTaskScheduler
from DBLOG.plugin import SQLiteFileFormatPlugin, find_plugin
from DBLOG.UI import run_app


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) != 1:
        print("usage: dblog <database.db>")
        return 2

    try:
        settings = load_settings()
    except ConfigError as e:
        print(f"Invalid configuration: {e}")
        return 2
    configure_logging(settings)

    file_name = argv[0]
    if find_plugin(file_name) is None:
        print(f"Not a supported log database: {file_name}")
        return 2

    scheduler = PeriodicTaskScheduler()
    log_file = SQLiteFileFormatPlugin(settings).open(file_name, scheduler)
    try:
        run_app(log_file)
    except KeyboardInterrupt:
        print("\nDBLOG terminated by user")
    finally:
        log_file.dispose()
        scheduler.stop_all()
    return 0


if __name__ == "__main__":
    sys.exit(main())
