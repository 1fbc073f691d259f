import threading
import time

from DBLOG.log_viewer.scheduler import PeriodicTask, PeriodicTaskScheduler


def wait_for(predicate, timeout=2.0):
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


class TestPeriodicTask:
    def test_runs_repeatedly(self):
        calls = []
        task = PeriodicTask(lambda: calls.append(1) or 0.01)
        task.start()
        try:
            assert wait_for(lambda: len(calls) >= 3)
        finally:
            task.stop(wait=True)
        assert not task.is_running

    def test_uses_returned_delay(self):
        calls = []
        task = PeriodicTask(lambda: calls.append(time.time()) or 10.0)
        task.start()
        try:
            assert wait_for(lambda: len(calls) == 1)
            time.sleep(0.2)
            assert len(calls) == 1
        finally:
            task.stop(wait=True)

    def test_wake_runs_next_tick_now(self):
        calls = []
        task = PeriodicTask(lambda: calls.append(1) or 10.0)
        task.start()
        try:
            assert wait_for(lambda: len(calls) == 1)
            task.wake()
            assert wait_for(lambda: len(calls) == 2)
        finally:
            task.stop(wait=True)

    def test_survives_exceptions(self):
        calls = []

        def flaky():
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("first tick fails")
            return 0.01

        task = PeriodicTask(flaky)
        task.delay = 0.0
        task.start()
        try:
            # FAILURE_DELAY separates the failing tick from the next one
            assert wait_for(lambda: len(calls) >= 2, timeout=3.0)
        finally:
            task.stop(wait=True)

    def test_invalid_delay_falls_back(self):
        calls = []

        def no_delay():
            calls.append(1)
            return None if len(calls) == 1 else 0.01

        task = PeriodicTask(no_delay)
        task.start()
        try:
            assert wait_for(lambda: len(calls) >= 2, timeout=3.0)
            assert task.is_running
        finally:
            task.stop(wait=True)

    def test_stop_waits_for_running_tick(self):
        entered = threading.Event()
        release = threading.Event()
        finished = []

        def slow():
            entered.set()
            release.wait(2)
            finished.append(1)
            return 0.01

        task = PeriodicTask(slow)
        task.start()
        assert entered.wait(2)
        task.stop()
        release.set()
        task.worker_thread.join(timeout=2)
        # The tick in progress completed, no further tick started
        assert finished == [1]
        assert task.tick_count == 1

    def test_not_started_before_start(self):
        task = PeriodicTask(lambda: 0.01)
        assert not task.is_running


class TestPeriodicTaskScheduler:
    def test_start_and_stop_all(self):
        scheduler = PeriodicTaskScheduler()
        first = scheduler.start_periodic(lambda: 0.01, name="first")
        second = scheduler.start_periodic(lambda: 0.01, name="second")
        assert first.is_running and second.is_running

        scheduler.stop_all()
        assert scheduler.tasks == []
        assert not first.is_running
        assert not second.is_running

    def test_stop_periodic_removes_task(self):
        scheduler = PeriodicTaskScheduler()
        task = scheduler.start_periodic(lambda: 0.01)
        scheduler.stop_periodic(task, wait=True)
        assert task not in scheduler.tasks
        assert not task.is_running
