import os
from unittest.mock import MagicMock

from watchdog.events import (
    DirModifiedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from DBLOG.sysmon.file_watch import DatabaseEventHandler, DatabaseWatcher


class TestDatabaseEventHandler:
    def setup_method(self):
        self.callback = MagicMock()
        self.db = os.path.abspath("watched/app.db")
        self.handler = DatabaseEventHandler(self.db, self.callback)

    def test_database_modified(self):
        self.handler.on_modified(FileModifiedEvent(self.db))
        self.callback.assert_called_once_with("modified", self.db)

    def test_wal_file_counts(self):
        self.handler.on_created(FileCreatedEvent(self.db + "-wal"))
        self.callback.assert_called_once_with("created", self.db + "-wal")

    def test_other_files_ignored(self):
        self.handler.on_modified(FileModifiedEvent(os.path.abspath("watched/other.db")))
        self.handler.on_deleted(FileDeletedEvent(os.path.abspath("watched/app.db.bak")))
        self.callback.assert_not_called()

    def test_directories_ignored(self):
        self.handler.on_modified(DirModifiedEvent(os.path.dirname(self.db)))
        self.callback.assert_not_called()

    def test_moved_onto_database(self):
        tmp = os.path.abspath("watched/app.db.tmp")
        self.handler.on_moved(FileMovedEvent(tmp, self.db))
        self.callback.assert_called_once_with("moved", tmp)


class TestDatabaseWatcher:
    def test_missing_directory_is_not_watched(self, tmp_path):
        watcher = DatabaseWatcher(tmp_path / "missing" / "app.db", MagicMock())
        assert watcher.start() is False
        watcher.stop()

    def test_start_and_stop(self, tmp_path):
        watcher = DatabaseWatcher(tmp_path / "app.db", MagicMock())
        assert watcher.start() is True
        assert watcher.observer.is_alive()
        watcher.stop()
        assert not watcher.observer.is_alive()
