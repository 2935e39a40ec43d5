"""Thread-based periodic runner for the housekeeping jobs.

Each ``PeriodicTask`` runs its job on its own daemon thread. A tick is
skipped while the previous run of the same task is still executing, and
``stop()`` interrupts the wait between ticks without cutting a run
short.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)


class PeriodicTask:

    def __init__(
        self,
        name: str,
        interval_seconds: float,
        job: Callable[[], object],
        *,
        run_immediately: bool = False,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.name = name
        self.interval_seconds = interval_seconds
        self._job = job
        self._run_immediately = run_immediately
        self._stop = threading.Event()
        self._running = threading.Lock()
        self._thread: threading.Thread | None = None
        self.runs = 0
        self.skipped = 0
        self.failures = 0

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError(f"Task {self.name} already started")
        self._thread = threading.Thread(target=self._loop, name=self.name, daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)

    def run_once(self) -> bool:
        """Run the job now unless a run is in flight. Returns True if it ran."""
        if not self._running.acquire(blocking=False):
            self.skipped += 1
            logger.warning("Skipping %s: previous run still in progress", self.name)
            return False
        try:
            self._job()
            self.runs += 1
        except Exception:
            self.failures += 1
            logger.exception("Scheduled task %s failed", self.name)
        finally:
            self._running.release()
        return True

    def _loop(self) -> None:
        if self._run_immediately:
            self.run_once()
        while not self._stop.wait(self.interval_seconds):
            self.run_once()


class Scheduler:
    """Owns a set of periodic tasks and starts or stops them together."""

    def __init__(self) -> None:
        self._tasks: list[PeriodicTask] = []

    @property
    def tasks(self) -> list[PeriodicTask]:
        return list(self._tasks)

    def every(
        self,
        interval_seconds: float,
        name: str,
        job: Callable[[], object],
        *,
        run_immediately: bool = False,
    ) -> PeriodicTask:
        task = PeriodicTask(name, interval_seconds, job, run_immediately=run_immediately)
        self._tasks.append(task)
        return task

    def start(self) -> None:
        for task in self._tasks:
            task.start()
            logger.info("Scheduled %s every %ss", task.name, task.interval_seconds)

    def stop(self, timeout: float | None = None) -> None:
        for task in self._tasks:
            task.stop(timeout)
        logger.info("Scheduler stopped")
