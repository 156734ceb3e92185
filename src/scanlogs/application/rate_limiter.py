from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, TypeVar

log = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(slots=True)
class QueuedTask:
    operation: Callable[[], Awaitable[Any]]
    future: asyncio.Future


class RateLimiter:
    """
    Starts at most `max_per_window` operations per rolling `window_s` seconds.

    Submissions are admitted strictly in order by one admission loop task, which
    is also the only writer of the recent-start window. Each operation's result
    or exception goes back to its own submitter only; nothing is retried here.

    The pending queue is unbounded unless `max_pending` > 0, in which case
    `submit` waits until there is room.
    """

    def __init__(
        self,
        name: str,
        max_per_window: int,
        window_s: float = 1.0,
        *,
        max_pending: int = 0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        if max_per_window < 1:
            raise ValueError(f"max_per_window must be >= 1, got {max_per_window}")
        if window_s <= 0:
            raise ValueError(f"window_s must be > 0, got {window_s}")
        self.name = name
        self.max_per_window = max_per_window
        self.window_s = window_s
        self.max_pending = max_pending
        self._clock = clock
        self._sleep = sleep
        self._starts: deque[float] = deque()
        self._queue: asyncio.Queue[QueuedTask] | None = None
        self._admitter: asyncio.Task | None = None
        self._running: set[asyncio.Task] = set()

    async def submit(self, operation: Callable[[], Awaitable[T]]) -> T:
        task = QueuedTask(operation, asyncio.get_running_loop().create_future())
        if self._queue is None:
            self._queue = asyncio.Queue(self.max_pending)
        await self._queue.put(task)
        if self._admitter is None or self._admitter.done():
            self._admitter = asyncio.create_task(self._admit(self._queue), name=f"ratelimiter:{self.name}")
        return await task.future

    def pending(self) -> int:
        return 0 if self._queue is None else self._queue.qsize()

    async def _admit(self, queue: asyncio.Queue[QueuedTask]) -> None:
        while True:
            task = await queue.get()
            try:
                if task.future.done():   # submitter cancelled while queued
                    continue
                await self._wait_for_slot()
                if task.future.done():
                    continue
                self._starts.append(self._clock())
                runner = asyncio.create_task(self._run(task))
                self._running.add(runner)
                runner.add_done_callback(self._running.discard)
            except asyncio.CancelledError:
                task.future.cancel()
                raise
            finally:
                queue.task_done()

    async def _wait_for_slot(self) -> None:
        while True:
            now = self._clock()
            while self._starts and now - self._starts[0] >= self.window_s:
                self._starts.popleft()
            if len(self._starts) < self.max_per_window:
                return
            delay = self.window_s - (now - self._starts[0])
            log.debug("%s: window full, %d queued, waiting %.3fs", self.name, self.pending(), delay)
            await self._sleep(delay)

    @staticmethod
    async def _run(task: QueuedTask) -> None:
        fut = task.future
        try:
            result = await task.operation()
        except asyncio.CancelledError:
            fut.cancel()
            raise
        except Exception as e:
            if not fut.done():
                fut.set_exception(e)
        else:
            if not fut.done():
                fut.set_result(result)

    async def aclose(self) -> None:
        tasks = list(self._running)
        if self._admitter is not None:
            tasks.append(self._admitter)
        for t in tasks:
            t.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        if self._queue is not None:
            while not self._queue.empty():
                self._queue.get_nowait().future.cancel()
        self._admitter = None
