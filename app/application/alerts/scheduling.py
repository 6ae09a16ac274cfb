"""Timer primitives shared by the alert services."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Something able to run a callback after a delay in seconds."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class AsyncioScheduler:
    """Schedule callbacks on an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop or asyncio.get_running_loop()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        return self._loop.call_later(max(delay, 0.0), callback)


class RepeatingTask:
    """Run ``callback`` every ``interval`` seconds until cancelled.

    With ``initial_delay`` of zero the first run happens synchronously inside
    :meth:`start`. When ``max_runs`` is reached the task stops on its own and
    ``on_complete`` is invoked. :meth:`cancel` removes the pending timer before
    returning, so no further run can happen afterwards.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        interval: float,
        callback: Callable[[], None],
        *,
        initial_delay: float = 0.0,
        max_runs: int | None = None,
        on_complete: Callable[[], None] | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._interval = interval
        self._callback = callback
        self._initial_delay = initial_delay
        self._max_runs = max_runs
        self._on_complete = on_complete
        self._handle: TimerHandle | None = None
        self._runs = 0
        self._started = False
        self._cancelled = False
        self._finished = False

    @property
    def runs(self) -> int:
        return self._runs

    @property
    def active(self) -> bool:
        return self._started and not (self._cancelled or self._finished)

    def start(self) -> "RepeatingTask":
        if self._started:
            return self
        self._started = True
        if self._initial_delay > 0:
            self._handle = self._scheduler.call_later(self._initial_delay, self._run)
        else:
            self._run()
        return self

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _run(self) -> None:
        self._handle = None
        if self._cancelled or self._finished:
            return
        self._runs += 1
        try:
            self._callback()
        except Exception:
            logger.exception("Repeating task callback failed")
        if self._cancelled:
            return
        if self._max_runs is not None and self._runs >= self._max_runs:
            self._finished = True
            if self._on_complete is not None:
                self._on_complete()
            return
        self._handle = self._scheduler.call_later(self._interval, self._run)


__all__ = ["AsyncioScheduler", "RepeatingTask", "Scheduler", "TimerHandle"]
