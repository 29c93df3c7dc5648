"""
Worker Pool

Bounded set of asyncio worker tasks consuming a bounded job backlog.
Workers are started on demand up to ``max_workers``; those above
``min_workers`` retire after sitting idle for ``keepalive`` seconds.
Submission never waits: when every worker is busy, the pool is at its
maximum and the backlog is full, it raises PoolSaturated.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, UTC
from typing import Awaitable, Callable

from keyword_crawler.core.exceptions import PoolSaturated

logger = logging.getLogger(__name__)

JobFactory = Callable[[], Awaitable[None]]


@dataclass(frozen=True)
class _WorkItem:
    name: str
    factory: JobFactory


class WorkerPool:
    """Bounded asyncio worker pool with fail-fast submission"""

    def __init__(
        self,
        min_workers: int = 4,
        max_workers: int = 20,
        queue_size: int = 100,
        keepalive: float = 60.0,
    ):
        if min_workers < 1 or max_workers < min_workers:
            raise ValueError(f"Invalid worker bounds [{min_workers}, {max_workers}]")
        self.min_workers = min_workers
        self.max_workers = max_workers
        self.queue_size = queue_size
        self.keepalive = keepalive

        self._queue: asyncio.Queue[_WorkItem] = asyncio.Queue()
        self._workers: dict[str, asyncio.Task] = {}
        self._running: dict[str, str] = {}  # worker name -> job name
        self._idle = 0
        self._seq = 0
        self._closed = False
        self.started_at: datetime | None = None

    @property
    def is_running(self) -> bool:
        return self.started_at is not None and not self._closed

    @property
    def worker_count(self) -> int:
        return len(self._workers)

    @property
    def active_tasks(self) -> int:
        return len(self._running)

    @property
    def queued(self) -> int:
        return self._queue.qsize()

    def start(self) -> None:
        """Spawn the core workers (must be called with a running event loop)."""
        if self._closed:
            raise RuntimeError("Worker pool has been shut down")
        if self.started_at is not None:
            raise RuntimeError("Worker pool is already running")
        for _ in range(self.min_workers):
            self._spawn()
        self.started_at = datetime.now(UTC)
        logger.info(f"✅ Worker pool started [workers={self.min_workers}-{self.max_workers}, backlog={self.queue_size}]")

    def _spawn(self) -> None:
        self._seq += 1
        name = f"crawl-worker-{self._seq}"
        self._idle += 1
        self._workers[name] = asyncio.create_task(self._worker_loop(name), name=name)

    def submit(self, name: str, factory: JobFactory) -> None:
        """
        Queue a job for execution.

        Args:
            name: Label used in logs (the job id)
            factory: Zero-argument callable returning the coroutine to run

        Raises:
            PoolSaturated: the pool is shut down, or has no free worker and
                no room left in the backlog
        """
        if not self.is_running:
            raise PoolSaturated("Worker pool is not accepting new jobs")

        free = self._idle - self._queue.qsize()
        if free <= 0:
            if len(self._workers) < self.max_workers:
                self._spawn()
            elif self._queue.qsize() >= self.queue_size:
                logger.warning(f"Rejecting job {name}: pool saturated")
                raise PoolSaturated(
                    f"Crawler is at capacity ({self.max_workers} running, "
                    f"{self._queue.qsize()} queued), try again later"
                )

        self._queue.put_nowait(_WorkItem(name, factory))

    async def _next_item(self) -> _WorkItem | None:
        if len(self._workers) <= self.min_workers:
            return await self._queue.get()
        try:
            async with asyncio.timeout(self.keepalive):
                return await self._queue.get()
        except TimeoutError:
            return None

    async def _worker_loop(self, name: str) -> None:
        try:
            while not self._closed:
                item = await self._next_item()
                if item is None:
                    if len(self._workers) > self.min_workers:
                        logger.debug(f"{name} idle for {self.keepalive}s, retiring")
                        break
                    continue

                self._idle -= 1
                self._running[name] = item.name
                try:
                    await item.factory()
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    logger.error(f"{name} failed job {item.name}: {e}", exc_info=True)
                finally:
                    self._running.pop(name, None)
                    self._idle += 1
                    self._queue.task_done()
        finally:
            self._idle -= 1
            self._workers.pop(name, None)

    async def shutdown(self, grace_period: float = 5.0) -> None:
        """
        Stop the pool: drop the backlog, cancel running jobs, wait up to
        ``grace_period`` seconds, then abandon anything still running.
        """
        if self._closed:
            return
        self._closed = True

        dropped = 0
        while not self._queue.empty():
            self._queue.get_nowait()
            self._queue.task_done()
            dropped += 1
        if dropped:
            logger.info(f"Dropped {dropped} queued jobs")

        tasks = list(self._workers.values())
        for task in tasks:
            task.cancel()

        if tasks:
            _, pending = await asyncio.wait(tasks, timeout=grace_period)
            if pending:
                logger.warning(
                    f"{len(pending)} worker(s) did not stop within {grace_period}s, abandoning"
                )

        # Workers cancelled before their first step never reach their finally
        self._workers.clear()
        self._running.clear()
        self._idle = 0
        self.started_at = None
        logger.info("✅ Worker pool stopped")

    def get_uptime(self) -> float | None:
        """Get pool uptime in seconds"""
        if not self.started_at:
            return None
        return (datetime.now(UTC) - self.started_at).total_seconds()
