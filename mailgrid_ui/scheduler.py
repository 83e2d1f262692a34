"""
Observable handle for the background scheduler daemon.

start() runs the daemon call on its own daemon thread and returns
immediately. The caller can poll, wait, subscribe to completion or cancel
a task that has not started yet. Failures are logged and kept on the
handle instead of disappearing with the thread.
"""

import logging
import threading
from concurrent.futures import CancelledError, Future
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

Listener = Callable[["SchedulerHandle"], None]


class SchedulerHandle:
    """Handle for one background scheduler run."""

    def __init__(self, db_path: str, future: Future):
        self.db_path = db_path
        self._future = future
        self._lock = threading.Lock()
        self._listeners: list[Listener] = []
        self._notified = False
        self._thread: Optional[threading.Thread] = None
        future.add_done_callback(self._on_done)

    @classmethod
    def start(cls, target: Callable[[], Any], db_path: str) -> "SchedulerHandle":
        """
        Run target on a dedicated daemon thread.

        The thread does not hold the interpreter open at exit, so a
        scheduler that never returns cannot block shutdown of the app.
        """
        future: Future = Future()
        handle = cls(db_path, future)

        def run() -> None:
            if not future.set_running_or_notify_cancel():
                return
            try:
                result = target()
            except BaseException as e:
                future.set_exception(e)
            else:
                future.set_result(result)

        thread = threading.Thread(target=run, name="mailgrid-scheduler", daemon=True)
        handle._thread = thread
        thread.start()
        return handle

    @property
    def thread(self) -> Optional[threading.Thread]:
        return self._thread

    def running(self) -> bool:
        return self._future.running()

    def done(self) -> bool:
        return self._future.done()

    def cancelled(self) -> bool:
        return self._future.cancelled()

    def cancel(self) -> bool:
        """
        Cancel the task if it has not started.

        An engine call already in progress cannot be aborted; returns False
        in that case.
        """
        return self._future.cancel()

    def result(self, timeout: Optional[float] = None) -> Any:
        """Wait for the task and return its result, re-raising its error."""
        return self._future.result(timeout)

    def exception(self, timeout: Optional[float] = None) -> Optional[BaseException]:
        """Wait for the task and return its error (None on success)."""
        return self._future.exception(timeout)

    @property
    def status(self) -> str:
        """One of: pending, running, cancelled, failed, stopped."""
        if self._future.cancelled():
            return "cancelled"
        if self._future.done():
            return "failed" if self._future.exception() is not None else "stopped"
        if self._future.running():
            return "running"
        return "pending"

    def add_listener(self, callback: Listener) -> None:
        """
        Call callback(handle) once the task finishes.

        Listeners added after completion are called immediately.
        """
        with self._lock:
            if not self._notified:
                self._listeners.append(callback)
                return
        self._call(callback)

    def _on_done(self, future: Future) -> None:
        try:
            error = future.exception()
        except CancelledError:
            error = None
        if error is not None:
            logger.error(
                f"Scheduler failed (db={self.db_path}): {error}",
                exc_info=(type(error), error, error.__traceback__),
            )
        else:
            logger.info(f"Scheduler finished (db={self.db_path})")

        with self._lock:
            self._notified = True
            listeners, self._listeners = self._listeners, []
        for callback in listeners:
            self._call(callback)

    def _call(self, callback: Listener) -> None:
        try:
            callback(self)
        except Exception:
            logger.exception("Scheduler listener raised")

    def __repr__(self) -> str:
        return f"SchedulerHandle(db_path={self.db_path}, status={self.status})"
