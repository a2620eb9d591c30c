# stitch/queue/request_queue.py
# In-memory priority queue limiting concurrent AI calls w/ per-item timeouts & rolling stats

from __future__ import annotations

import asyncio
import time
from collections import deque
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Awaitable, Callable, Deque, Dict, Optional, TypeVar

from ..core.exceptions import QueueClearedError, QueueTimeoutError
from ..core.verbose import vlog_debug, vlog_queue

T = TypeVar("T")

# sliding window size for wait/process time averages
STATS_WINDOW = 100


# * Conventional priority bands (any int is accepted; higher runs first)
class Priority(IntEnum):
    CRITICAL = 10  # user is waiting
    HIGH = 5  # interactive operations
    NORMAL = 0
    LOW = -5  # background work
    BATCH = -10


# * Queue limits & logging switch
@dataclass
class QueueConfig:
    max_concurrent: int = 5
    default_timeout_ms: int = 30000
    enable_logging: bool = False

    def __post_init__(self) -> None:
        if (
            not isinstance(self.max_concurrent, int)
            or isinstance(self.max_concurrent, bool)
            or self.max_concurrent < 1
        ):
            raise ValueError(
                f"max_concurrent must be a positive integer, got {self.max_concurrent}"
            )
        if (
            not isinstance(self.default_timeout_ms, int)
            or isinstance(self.default_timeout_ms, bool)
            or self.default_timeout_ms < 0
        ):
            raise ValueError(
                f"default_timeout_ms must be an integer >= 0, got {self.default_timeout_ms}"
            )

    # build from StitchSettings (duck-typed to keep this module free of config imports)
    @classmethod
    def from_settings(cls, settings: Any) -> "QueueConfig":
        return cls(
            max_concurrent=settings.queue_max_concurrent,
            default_timeout_ms=settings.queue_default_timeout_ms,
            enable_logging=settings.queue_logging,
        )


# * One submitted unit of work; the future is the caller's pending result
@dataclass
class QueueItem:
    id: str
    priority: int
    execute: Callable[[], Awaitable[Any]]
    future: "asyncio.Future[Any]"
    created_at: float = field(default_factory=time.monotonic)
    timeout_ms: Optional[int] = None


# * Snapshot of queue counters (times in ms)
@dataclass
class QueueStats:
    queue_size: int
    active_requests: int
    completed_requests: int
    failed_requests: int
    average_wait_time: int
    average_process_time: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "queueSize": self.queue_size,
            "activeRequests": self.active_requests,
            "completedRequests": self.completed_requests,
            "failedRequests": self.failed_requests,
            "averageWaitTime": self.average_wait_time,
            "averageProcessTime": self.average_process_time,
        }


def _average(samples: Deque[float]) -> int:
    if not samples:
        return 0
    return round(sum(samples) / len(samples))


# retrieve the outcome of an abandoned execution so asyncio does not warn about it
def _consume_outcome(task: "asyncio.Future[Any]") -> None:
    if not task.cancelled():
        task.exception()


class AIRequestQueue:
    """Priority queue that caps how many AI calls run at once.

    Items wait in a list ordered by descending priority (FIFO among equal
    priorities). Whenever fewer than ``max_concurrent`` items are in flight the
    head is admitted and executed, raced against its timeout. Each settle
    triggers another admission pass, so the queue drains without polling.

    All state lives on one event loop; there are no threads or locks.
    """

    def __init__(self, config: Optional[QueueConfig] = None):
        self.config = config or QueueConfig()
        self._pending: list[QueueItem] = []
        self._active = 0
        self._completed = 0
        self._failed = 0
        self._wait_times: Deque[float] = deque(maxlen=STATS_WINDOW)
        self._process_times: Deque[float] = deque(maxlen=STATS_WINDOW)
        self._counter = 0
        self._tasks: set["asyncio.Task[None]"] = set()

        if self.config.enable_logging:
            vlog_queue(
                "AI request queue initialized",
                max_concurrent=self.config.max_concurrent,
                default_timeout_ms=self.config.default_timeout_ms,
            )

    # * Submit work & wait for its result (or error)
    async def enqueue(
        self,
        execute: Callable[[], Awaitable[T]],
        priority: int = Priority.NORMAL,
        timeout_ms: Optional[int] = None,
    ) -> T:
        loop = asyncio.get_running_loop()
        self._counter += 1
        item = QueueItem(
            id=f"req-{self._counter}",
            priority=int(priority),
            execute=execute,
            future=loop.create_future(),
            created_at=time.monotonic(),
            timeout_ms=self._resolve_timeout(timeout_ms),
        )
        self._insert(item)
        vlog_debug("QUEUE", f"Queued {item.id} (priority={item.priority}, timeout_ms={item.timeout_ms})")

        if self.config.enable_logging:
            vlog_queue(
                f"Request queued: {item.id}",
                queue_size=len(self._pending),
                priority=item.priority,
            )

        self._admit()
        return await item.future

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def active_count(self) -> int:
        return self._active

    # * Pure read of current counters
    def get_stats(self) -> QueueStats:
        return QueueStats(
            queue_size=len(self._pending),
            active_requests=self._active,
            completed_requests=self._completed,
            failed_requests=self._failed,
            average_wait_time=_average(self._wait_times),
            average_process_time=_average(self._process_times),
        )

    # * Reject every pending item; in-flight items are untouched
    def clear(self) -> int:
        pending, self._pending = self._pending, []
        for item in pending:
            if not item.future.done():
                item.future.set_exception(QueueClearedError())
        vlog_queue(f"Queue cleared: {len(pending)} requests cancelled")
        return len(pending)

    def reset_stats(self) -> None:
        self._completed = 0
        self._failed = 0
        self._wait_times.clear()
        self._process_times.clear()
        vlog_queue("Queue statistics reset")

    def _resolve_timeout(self, timeout_ms: Optional[int]) -> Optional[int]:
        # None -> configured default; <= 0 disables the timer
        value = self.config.default_timeout_ms if timeout_ms is None else timeout_ms
        return value if value > 0 else None

    # insert before the first item w/ strictly lower priority
    def _insert(self, item: QueueItem) -> None:
        for index, queued in enumerate(self._pending):
            if queued.priority < item.priority:
                self._pending.insert(index, item)
                return
        self._pending.append(item)

    def _admit(self) -> None:
        while self._active < self.config.max_concurrent and self._pending:
            item = self._pending.pop(0)
            # caller gave up (cancelled) while waiting
            if item.future.done():
                continue

            self._active += 1
            wait_ms = (time.monotonic() - item.created_at) * 1000
            self._wait_times.append(wait_ms)

            if self.config.enable_logging:
                vlog_queue(
                    f"Processing request: {item.id}",
                    wait_ms=round(wait_ms),
                    queue_size=len(self._pending),
                    active_requests=self._active,
                )

            task = asyncio.ensure_future(self._process(item))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def _process(self, item: QueueItem) -> None:
        started = time.monotonic()
        try:
            result = await self._run_with_timeout(item)
        except asyncio.CancelledError:
            self._failed += 1
            if not item.future.done():
                item.future.cancel()
            raise
        except Exception as e:
            self._failed += 1
            vlog_queue(
                f"Request failed: {item.id}",
                failed_requests=self._failed,
                error=str(e) or type(e).__name__,
            )
            if not item.future.done():
                item.future.set_exception(e)
        else:
            process_ms = (time.monotonic() - started) * 1000
            self._process_times.append(process_ms)
            self._completed += 1
            if not item.future.done():
                item.future.set_result(result)

            if self.config.enable_logging:
                vlog_queue(
                    f"Request completed: {item.id}",
                    process_ms=round(process_ms),
                    completed_requests=self._completed,
                )
        finally:
            self._active -= 1
            self._admit()

    async def _run_with_timeout(self, item: QueueItem) -> Any:
        execution = asyncio.ensure_future(item.execute())
        if item.timeout_ms is None:
            return await execution

        done, _ = await asyncio.wait({execution}, timeout=item.timeout_ms / 1000)
        if execution in done:
            return execution.result()

        # late outcome is ignored, not cancelled
        execution.add_done_callback(_consume_outcome)
        raise QueueTimeoutError(item.id, item.timeout_ms)


# =============================================================================
# Process-default queue (explicit instances are preferred)
# =============================================================================

_default_queue: Optional[AIRequestQueue] = None


# * Get or lazily create the process-default queue (config from settings if omitted)
def get_ai_queue(config: Optional[QueueConfig] = None) -> AIRequestQueue:
    global _default_queue
    if _default_queue is None:
        if config is None:
            from ..config.settings import settings_manager

            config = QueueConfig.from_settings(settings_manager.load())
        _default_queue = AIRequestQueue(config)
    return _default_queue


# * Drop the process-default queue (settings changes, tests)
def reset_ai_queue() -> None:
    global _default_queue
    _default_queue = None


async def enqueue_ai_request(
    execute: Callable[[], Awaitable[T]],
    priority: int = Priority.NORMAL,
    timeout_ms: Optional[int] = None,
    queue: Optional[AIRequestQueue] = None,
) -> T:
    target = queue if queue is not None else get_ai_queue()
    return await target.enqueue(execute, priority, timeout_ms)


def get_queue_stats(queue: Optional[AIRequestQueue] = None) -> QueueStats:
    target = queue if queue is not None else get_ai_queue()
    return target.get_stats()
