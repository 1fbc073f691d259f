"""
Listener Module - Notifications sent by a log file to its consumers
"""
import logging
import threading
from typing import List, Protocol

logger = logging.getLogger(__name__)


class LogFileListener(Protocol):
    """Anything that wants to hear about changes of a log file"""

    def reset(self) -> None:
        """Everything previously read from the log file is invalid"""

    def lines_available(self, total: int) -> None:
        """Lines [0, total) can now be read"""


class ListenerCollection:
    """Fans notifications out to every registered listener"""

    def __init__(self):
        self._listeners: List[LogFileListener] = []
        self._lock = threading.Lock()

    def add(self, listener: LogFileListener) -> None:
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def remove(self, listener: LogFileListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)

    def reset(self) -> None:
        for listener in self._snapshot():
            try:
                listener.reset()
            except Exception:
                logger.exception("Listener %r failed to handle reset", listener)

    def lines_available(self, total: int) -> None:
        for listener in self._snapshot():
            try:
                listener.lines_available(total)
            except Exception:
                logger.exception("Listener %r failed to handle %d lines", listener, total)

    def _snapshot(self) -> List[LogFileListener]:
        with self._lock:
            return list(self._listeners)
