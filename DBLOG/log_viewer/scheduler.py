"""
Scheduler Module - Runs periodic tasks on background threads

Handles:
- One daemon thread per task, ticks never overlap
- Delay until the next tick chosen by the task itself
- Stopping between ticks, and waking a waiting task early
"""
import logging
from threading import Event, Thread
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

# Delay used after a failed tick, or when a tick returns an unusable delay
FAILURE_DELAY = 0.5


class PeriodicTask:
    """A callable executed over and over on its own thread"""

    def __init__(self, callback: Callable[[], float], name: str = "periodic-task",
                 initial_delay: float = 0.0):
        """
        Initialize the task (it does not run until start())

        Args:
            callback: Runs one tick and returns the seconds to wait before the next
            name: Thread name, shows up in logs
            initial_delay: Seconds to wait before the first tick
        """
        self.callback = callback
        self.name = name
        self.stop_event = Event()
        self.wake_event = Event()
        self.delay = initial_delay
        self.tick_count = 0
        self.worker_thread: Optional[Thread] = None

    @property
    def is_running(self) -> bool:
        return self.worker_thread is not None and self.worker_thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        self.stop_event.clear()
        self.worker_thread = Thread(target=self._worker_loop, name=self.name, daemon=True)
        self.worker_thread.start()

    def stop(self, wait: bool = False, timeout: Optional[float] = 2.0) -> None:
        """
        Ask the task to stop; a tick in progress is allowed to finish

        Args:
            wait: Join the worker thread before returning
            timeout: Upper bound for the join
        """
        self.stop_event.set()
        self.wake_event.set()
        if wait and self.worker_thread:
            self.worker_thread.join(timeout=timeout)

    def wake(self) -> None:
        """Cut the current wait short so the next tick runs now"""
        self.wake_event.set()

    def _worker_loop(self) -> None:
        """Main worker loop - runs in background thread"""
        while not self.stop_event.is_set():
            if self.delay > 0:
                self.wake_event.wait(self.delay)
            self.wake_event.clear()
            if self.stop_event.is_set():
                break

            try:
                delay = self.callback()
                if isinstance(delay, bool) or not isinstance(delay, (int, float)) or not delay > 0:
                    logger.warning("Task %s returned delay %r, using %.3fs",
                                   self.name, delay, FAILURE_DELAY)
                    delay = FAILURE_DELAY
                self.delay = delay
            except Exception:
                # Keep the worker alive, nobody would restart it
                self.delay = max(self.delay, FAILURE_DELAY)
                logger.exception("Task %s raised, it will run again in %.3fs",
                                 self.name, self.delay)
            self.tick_count += 1


class PeriodicTaskScheduler:
    """Creates and tracks periodic tasks so they can be stopped together"""

    def __init__(self):
        self.tasks: List[PeriodicTask] = []

    def start_periodic(self, callback: Callable[[], float], name: str = "periodic-task",
                       initial_delay: float = 0.0) -> PeriodicTask:
        task = PeriodicTask(callback, name=name, initial_delay=initial_delay)
        self.tasks.append(task)
        task.start()
        return task

    def stop_periodic(self, task: PeriodicTask, wait: bool = False) -> None:
        task.stop(wait=wait)
        if task in self.tasks:
            self.tasks.remove(task)

    def stop_all(self, wait: bool = True) -> None:
        for task in list(self.tasks):
            self.stop_periodic(task, wait=wait)
