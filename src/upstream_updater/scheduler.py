"""Fixed-delay repetition of an async check, on the event loop or a thread."""

from __future__ import annotations

import asyncio
import threading
from datetime import timedelta
from typing import Any, Awaitable, Callable

from upstream_updater.runtime_logging import RuntimeLogger, get_runtime_logger

AsyncTask = Callable[[], Awaitable[Any]]


def _seconds(period: timedelta | float) -> float:
    seconds = period.total_seconds() if isinstance(period, timedelta) else float(period)
    if seconds <= 0:
        raise ValueError("period must be positive")
    return seconds


class PeriodicTask:
    """Runs ``task`` now and then every ``period`` until stopped.

    A failing run is logged and the loop carries on. ``iterations`` bounds
    the number of runs; None repeats until :meth:`stop`.
    """

    def __init__(
        self,
        task: AsyncTask,
        period: timedelta | float,
        *,
        name: str = "update-check",
        iterations: int | None = None,
        logger: RuntimeLogger | None = None,
    ) -> None:
        self._task = task
        self.period_s = _seconds(period)
        self.name = name
        self.iterations = iterations
        self.ticks = 0
        self._logger = logger or get_runtime_logger()
        self._handle: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._handle is not None and not self._handle.done()

    def start(self) -> asyncio.Task[None]:
        if self.running:
            assert self._handle is not None
            return self._handle
        self._handle = asyncio.get_running_loop().create_task(self._run(), name=self.name)
        self._logger.info("scheduler.started", task=self.name, period_s=self.period_s)
        return self._handle

    async def wait(self) -> None:
        if self._handle is not None:
            await self._handle

    async def stop(self) -> None:
        handle = self._handle
        if handle is None:
            return
        handle.cancel()
        try:
            await handle
        except asyncio.CancelledError:
            pass
        self._handle = None
        self._logger.info("scheduler.stopped", task=self.name, ticks=self.ticks)

    async def _run(self) -> None:
        while True:
            try:
                await self._task()
            except Exception as exc:
                self._logger.exception("scheduler.tick.failed", exc, task=self.name)
            self.ticks += 1
            if self.iterations is not None and self.ticks >= self.iterations:
                return
            await asyncio.sleep(self.period_s)


class ThreadedPeriodicTask:
    """Same loop as :class:`PeriodicTask` for hosts without an event loop.

    Each run executes in a fresh event loop on a daemon thread.
    """

    def __init__(
        self,
        task: AsyncTask,
        period: timedelta | float,
        *,
        name: str = "update-check",
        iterations: int | None = None,
        logger: RuntimeLogger | None = None,
    ) -> None:
        self._task = task
        self.period_s = _seconds(period)
        self.name = name
        self.iterations = iterations
        self.ticks = 0
        self._logger = logger or get_runtime_logger()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> threading.Thread:
        if self._thread is not None and self._thread.is_alive():
            return self._thread
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()
        self._logger.info("scheduler.started", task=self.name, period_s=self.period_s, threaded=True)
        return self._thread

    def wait(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout=timeout)

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
        self._logger.info("scheduler.stopped", task=self.name, ticks=self.ticks, threaded=True)

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                asyncio.run(self._task())
            except Exception as exc:
                self._logger.exception("scheduler.tick.failed", exc, task=self.name)
            self.ticks += 1
            if self.iterations is not None and self.ticks >= self.iterations:
                return
            if self._stop.wait(self.period_s):
                return
