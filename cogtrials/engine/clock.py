"""
Clocks used by the phase timer.

A clock provides two things: the current time in milliseconds and a way to
run a callback after a delay. Times are elapsed wall-clock time, so a host
that stops delivering frames still sees correct reaction times.
"""
import asyncio
import heapq
import itertools
from collections.abc import Callable
from typing import Protocol


class ClockHandle(Protocol):
    def cancel(self) -> None: ...


class Clock(Protocol):
    def now_ms(self) -> float: ...

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> ClockHandle: ...


class AsyncioClock:
    """Clock backed by an asyncio event loop (monotonic ``loop.time()``)."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop or asyncio.get_running_loop()

    def now_ms(self) -> float:
        return self._loop.time() * 1000.0

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self._loop.call_later(delay_ms / 1000.0, callback)


class _ManualHandle:
    def __init__(self, when: float, seq: int, callback: Callable[[], None]):
        self.when = when
        self.seq = seq
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def __lt__(self, other: "_ManualHandle") -> bool:
        return (self.when, self.seq) < (other.when, other.seq)


class ManualClock:
    """
    Deterministic virtual clock.

    Nothing happens until advance() is called; callbacks then run in
    deadline order (ties in scheduling order) with now_ms() set to each
    callback's deadline. Callbacks scheduled while advancing run in the same
    call if they fall due before the target time.
    """

    def __init__(self, start_ms: float = 0.0):
        self._now = float(start_ms)
        self._queue: list[_ManualHandle] = []
        self._counter = itertools.count()

    def now_ms(self) -> float:
        return self._now

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> _ManualHandle:
        handle = _ManualHandle(self._now + max(delay_ms, 0), next(self._counter), callback)
        heapq.heappush(self._queue, handle)
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for h in self._queue if not h.cancelled)

    def next_deadline(self) -> float | None:
        self._drop_cancelled()
        return self._queue[0].when if self._queue else None

    def advance(self, ms: float) -> None:
        """Move time forward by ``ms`` and run every callback that falls due."""
        if ms < 0:
            raise ValueError("cannot move a clock backwards")
        target = self._now + ms
        while True:
            self._drop_cancelled()
            if not self._queue or self._queue[0].when > target:
                break
            handle = heapq.heappop(self._queue)
            self._now = handle.when
            handle.callback()
        self._now = target

    def run_until_idle(self, limit_ms: float = 3_600_000) -> None:
        """Advance deadline by deadline until nothing is scheduled."""
        stop = self._now + limit_ms
        while True:
            deadline = self.next_deadline()
            if deadline is None:
                return
            if deadline > stop:
                raise RuntimeError(f"clock still busy after {limit_ms} ms of virtual time")
            self.advance(deadline - self._now)

    def _drop_cancelled(self) -> None:
        while self._queue and self._queue[0].cancelled:
            heapq.heappop(self._queue)
