"""
Plugin Module - Entry point used by the host application to open .db files
"""
import os
from typing import Optional, Sequence

from DBLOG.config import Settings
from DBLOG.log_viewer.scheduler import PeriodicTaskScheduler
from DBLOG.log_viewer.sqlite_log_file import SQLiteLogFile


class SQLiteFileFormatPlugin:
    """Opens SQLite log databases as log files"""

    author = "DBLOG contributors"
    supported_extensions = (".db",)

    def __init__(self, settings: Optional[Settings] = None, website: Optional[str] = None):
        """
        Args:
            settings: Settings handed to every opened log file
            website: Project page the host may link to, None when unpublished
        """
        self.settings = settings
        self.website = website

    def can_open(self, file_name) -> bool:
        extension = os.path.splitext(str(file_name))[1].lower()
        return extension in self.supported_extensions

    def open(self, file_name, scheduler: PeriodicTaskScheduler) -> SQLiteLogFile:
        """Start watching file_name, ticks run on the given scheduler"""
        return SQLiteLogFile(file_name, scheduler, settings=self.settings)


PLUGINS: Sequence = (SQLiteFileFormatPlugin(),)


def find_plugin(file_name, plugins: Sequence = PLUGINS):
    """Return the first plugin claiming file_name's extension, or None"""
    for plugin in plugins:
        if plugin.can_open(file_name):
            return plugin
    return None
