"""Single-consumer print queue serialising jobs onto one driver."""

from __future__ import annotations

import logging
import queue
import threading
from concurrent.futures import Future
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable

from thermalprint_printer import PrinterDriver, PrinterError


logger = logging.getLogger("thermalprint.queue")

PrintJob = Callable[[PrinterDriver], Any]


class QueueState(str, Enum):
    STOPPED = "Stopped"
    IDLE = "Idle"
    PRINTING = "Printing"
    STOPPING = "Stopping"


@dataclass
class QueueStatus:
    state: QueueState = QueueState.STOPPED
    jobs_submitted: int = 0
    jobs_done: int = 0
    jobs_failed: int = 0
    last_error: str | None = None
    current_job: str | None = None


@dataclass(frozen=True)
class _QueuedJob:
    name: str
    job: PrintJob
    future: Future


class PrintQueue:
    """Threads may submit jobs concurrently; one worker runs them in order.

    Each job receives the driver. Its result or exception is delivered through
    the returned ``Future``; a failed job does not stop the queue.
    """

    def __init__(self, driver: PrinterDriver, max_events: int = 1000) -> None:
        self.driver = driver
        self._queue: queue.Queue[_QueuedJob | None] = queue.Queue()
        self._status = QueueStatus()
        self._lock = threading.RLock()
        self._thread: threading.Thread | None = None
        self._accepting = False
        self._events: list[dict[str, Any]] = []
        self._max_events = max_events

    @property
    def status(self) -> QueueStatus:
        return self._status

    def recent_events(self, limit: int = 200) -> list[dict[str, Any]]:
        with self._lock:
            return self._events[-limit:]

    def _log_event(self, event: str, **fields: Any) -> None:
        row = {
            "ts_utc": datetime.now(timezone.utc).isoformat(),
            "event": event,
            "state": self._status.state.value,
        }
        row.update(fields)
        with self._lock:
            self._events.append(row)
            if len(self._events) > self._max_events:
                self._events = self._events[-self._max_events :]
        logger.debug(event, extra={"event": event})

    def start(self) -> None:
        with self._lock:
            if self._thread is not None and self._thread.is_alive():
                return
            self.driver.clear_cancel()
            self._accepting = True
            self._status.state = QueueState.IDLE
            self._thread = threading.Thread(target=self._run, name="thermalprint-queue", daemon=True)
            self._thread.start()
            self._log_event("queue_started")

    def stop(self, cancel: bool = False, timeout: float | None = None) -> bool:
        """Stop after queued jobs finish, or abort the pending wait with ``cancel``.

        Returns False when the worker is still busy after ``timeout``; the queue
        then stays in ``STOPPING`` and ``stop`` may be called again.
        """
        with self._lock:
            thread = self._thread
            if thread is None:
                return True
            if cancel:
                self.driver.cancel()
            if self._accepting:
                self._accepting = False
                self._status.state = QueueState.STOPPING
                self._queue.put(None)
        thread.join(timeout)
        with self._lock:
            if thread.is_alive():
                self._log_event("queue_stop_timeout", cancelled=cancel)
                return False
            self._thread = None
            self._status.state = QueueState.STOPPED
            self._log_event("queue_stopped", cancelled=cancel)
        return True

    def submit(self, job: PrintJob, name: str = "job") -> Future:
        future: Future = Future()
        with self._lock:
            if not self._accepting:
                raise RuntimeError("Print queue is not accepting jobs")
            self._status.jobs_submitted += 1
            self._queue.put(_QueuedJob(name=name, job=job, future=future))
            self._log_event("job_submitted", job=name)
        return future

    def join(self) -> None:
        self._queue.join()

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is None:
                    return
                self._execute(item)
            finally:
                self._queue.task_done()

    def _execute(self, item: _QueuedJob) -> None:
        if not item.future.set_running_or_notify_cancel():
            self._log_event("job_skipped", job=item.name)
            return
        with self._lock:
            if self._status.state != QueueState.STOPPING:
                self._status.state = QueueState.PRINTING
            self._status.current_job = item.name
        try:
            result = item.job(self.driver)
        except PrinterError as exc:
            self._fail(item, exc)
        except Exception as exc:
            logger.exception(f"job {item.name} crashed", extra={"event": "job_crashed"})
            self._fail(item, exc)
        else:
            with self._lock:
                self._status.jobs_done += 1
                self._log_event("job_done", job=item.name)
            item.future.set_result(result)
        finally:
            with self._lock:
                self._status.current_job = None
                if self._status.state == QueueState.PRINTING:
                    self._status.state = QueueState.IDLE

    def _fail(self, item: _QueuedJob, exc: Exception) -> None:
        with self._lock:
            self._status.jobs_failed += 1
            self._status.last_error = str(exc)
            self._log_event("job_failed", job=item.name, error=str(exc))
        item.future.set_exception(exc)
