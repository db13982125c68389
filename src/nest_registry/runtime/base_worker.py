"""Interval-driven background worker running on a daemon thread."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import ClassVar


class PeriodicWorker(ABC):
    """Runs ``_tick()`` once per ``interval`` seconds until stopped.

    The first tick happens one interval after ``start()``. A failing tick is
    logged and the schedule continues.
    """

    worker_name: ClassVar[str] = "periodic-worker"
    logger_name: ClassVar[str] = "nest_registry.worker"
    default_interval: ClassVar[float] = 1.0

    def __init__(self, *, interval: float | None = None) -> None:
        resolved = self.default_interval if interval is None else interval
        if resolved <= 0:
            raise ValueError("interval must be positive")
        self._interval = resolved
        self._wake = threading.Event()
        self._thread: threading.Thread | None = None
        self._logger = logging.getLogger(self.logger_name)

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._wake.clear()
        self._thread = threading.Thread(target=self._loop, name=self.worker_name, daemon=True)
        self._thread.start()
        self._logger.info(
            "worker started",
            extra={"data": {"worker": self.worker_name, "interval_s": self._interval}},
        )

    def stop(self, timeout: float = 5.0) -> bool:
        """Wake the thread, wait up to ``timeout`` and return whether it exited."""
        thread = self._thread
        if thread is None:
            return True
        self._wake.set()
        thread.join(timeout=timeout)
        stopped = not thread.is_alive()
        if stopped:
            self._thread = None
        else:
            self._logger.warning(
                "worker did not stop in time",
                extra={"data": {"worker": self.worker_name, "timeout_s": timeout}},
            )
        return stopped

    def _loop(self) -> None:
        # wait() returns True once stop() sets the event.
        while not self._wake.wait(self._interval):
            try:
                self._tick()
            except Exception:
                self._logger.exception("worker tick failed", extra={"data": {"worker": self.worker_name}})

    @abstractmethod
    def _tick(self) -> None:
        """Do one unit of periodic work."""


__all__ = ["PeriodicWorker"]
