import logging
import os

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

# sqlite writes through these next to the database itself
SIDECAR_SUFFIXES = ("", "-journal", "-wal")


class DatabaseEventHandler(FileSystemEventHandler):
    def __init__(self, database_path, callback=None):
        super().__init__()
        database_path = os.path.abspath(database_path)
        self.watched_paths = {database_path + suffix for suffix in SIDECAR_SUFFIXES}
        self.callback = callback

    def _process_event(self, event_type, event):
        if event.is_directory:
            return
        paths = [event.src_path, getattr(event, "dest_path", "")]
        if any(os.path.abspath(p) in self.watched_paths for p in paths if p):
            if self.callback:
                self.callback(event_type, event.src_path)

    def on_created(self, event):
        self._process_event("created", event)

    def on_modified(self, event):
        self._process_event("modified", event)

    def on_deleted(self, event):
        self._process_event("deleted", event)

    def on_moved(self, event):
        self._process_event("moved", event)


class DatabaseWatcher:
    """Calls back whenever the database file (or its journal) changes on disk"""

    def __init__(self, database_path, callback=None):
        self.database_path = os.path.abspath(database_path)
        self.observer = Observer()
        self.event_handler = DatabaseEventHandler(self.database_path, callback)
        self.schedule_object = None

    def start(self) -> bool:
        directory = os.path.dirname(self.database_path)
        if not os.path.isdir(directory):
            logger.warning("Directory not found, not watching: %s", directory)
            return False

        self.schedule_object = self.observer.schedule(self.event_handler, directory, recursive=False)
        if not self.observer.is_alive():
            self.observer.start()
        logger.debug("Started watching %s", self.database_path)
        return True

    def stop(self):
        if self.observer.is_alive():
            self.observer.stop()
            self.observer.join()
            logger.debug("Stopped watching %s", self.database_path)
        self.schedule_object = None
