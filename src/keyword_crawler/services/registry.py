"""
Job Registry

Creates keyword crawl jobs, schedules their traversal on the worker pool and
answers lookups by job id. Owns the HTTP session and drives shutdown so every
job reaches DONE.
"""

import logging
import secrets
import string

import aiohttp

from keyword_crawler.core.config import CrawlerConfig
from keyword_crawler.core.exceptions import (
    KEYWORD_MAX_LENGTH,
    KEYWORD_MIN_LENGTH,
    InvalidKeyword,
    PoolSaturated,
)
from keyword_crawler.domain.job import Job, JobStatus
from keyword_crawler.services.fetcher import Fetcher, create_session
from keyword_crawler.workers.engine import CrawlEngine
from keyword_crawler.workers.pool import WorkerPool

logger = logging.getLogger(__name__)

JOB_ID_LENGTH = 8
JOB_ID_ALPHABET = string.ascii_letters + string.digits


def validate_keyword(keyword: str | None) -> str:
    if keyword is None or not (KEYWORD_MIN_LENGTH <= len(keyword) <= KEYWORD_MAX_LENGTH):
        logger.warning(
            f"Keyword validation failed - Value: {keyword!r}, "
            f"Length: {len(keyword) if keyword is not None else 'null'}"
        )
        raise InvalidKeyword()
    return keyword


def generate_job_id() -> str:
    return "".join(secrets.choice(JOB_ID_ALPHABET) for _ in range(JOB_ID_LENGTH))


class JobRegistry:
    """In-memory job registry backed by a bounded worker pool"""

    def __init__(
        self,
        config: CrawlerConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        engine: CrawlEngine | None = None,
    ):
        self.config = config
        self._jobs: dict[str, Job] = {}
        self._session = session
        self._owns_session = session is None
        self._engine = engine
        self._pool = WorkerPool(
            min_workers=config.min_workers,
            max_workers=config.max_workers,
            queue_size=config.job_queue_size,
            keepalive=config.worker_keepalive_sec,
        )
        self._shutting_down = False

    @property
    def pool(self) -> WorkerPool:
        return self._pool

    @property
    def accepting(self) -> bool:
        return self._pool.is_running and not self._shutting_down

    async def start(self) -> None:
        """Create the HTTP session, engine and worker pool."""
        if self._engine is None:
            if self._session is None:
                self._session = create_session(self.config)
            fetcher = Fetcher.from_config(self._session, self.config)
            self._engine = CrawlEngine(self.config, fetcher)
        self._pool.start()
        logger.info(
            f"Crawler initialized [baseUrl={self.config.base_url}, maxDepth={self.config.max_depth}, "
            f"threadPool={self.config.min_workers}-{self.config.max_workers}]"
        )

    async def __aenter__(self) -> "JobRegistry":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.shutdown()

    def submit(self, keyword: str | None) -> Job:
        """
        Register a new crawl for ``keyword`` and schedule it.

        Raises:
            InvalidKeyword: keyword missing or outside 4..32 characters
            PoolSaturated: no capacity left, or shutting down
        """
        keyword = validate_keyword(keyword)
        if not self.accepting:
            raise PoolSaturated("Crawler is not accepting new searches")

        job_id = generate_job_id()
        while job_id in self._jobs:
            job_id = generate_job_id()

        job = Job(job_id, keyword, max_results=self.config.result_cap)
        self._jobs[job_id] = job

        try:
            self._pool.submit(job_id, lambda: self._engine.run(job))
        except PoolSaturated:
            self._jobs.pop(job_id, None)
            raise

        logger.info(f"Starting search [id={job_id}, keyword={keyword}]")
        return job

    def lookup(self, job_id: str) -> Job | None:
        job = self._jobs.get(job_id)
        if job is None:
            logger.debug(f"Search not found - ID: {job_id}")
        return job

    def __len__(self) -> int:
        return len(self._jobs)

    def stats(self) -> dict:
        jobs = list(self._jobs.values())
        active = sum(1 for job in jobs if job.status is JobStatus.ACTIVE)
        return {
            "jobs_total": len(jobs),
            "jobs_active": active,
            "jobs_done": len(jobs) - active,
            "pool_status": "running" if self._pool.is_running else "stopped",
            "workers": self._pool.worker_count,
            "active_tasks": self._pool.active_tasks,
            "queued": self._pool.queued,
            "min_workers": self._pool.min_workers,
            "max_workers": self._pool.max_workers,
            "uptime_seconds": self._pool.get_uptime(),
        }

    def _finish_all(self) -> int:
        return sum(1 for job in list(self._jobs.values()) if job.mark_done())

    async def shutdown(self) -> None:
        """
        Stop crawling: mark every active job DONE, cancel in-flight traversals,
        wait a bounded grace period, then release the HTTP session.
        """
        if self._shutting_down:
            return
        self._shutting_down = True
        logger.info("Initiating crawler shutdown sequence")

        try:
            finished = self._finish_all()
            logger.debug(f"Marked {finished} active searches as complete")
            await self._pool.shutdown(grace_period=self.config.shutdown_grace_sec)
        finally:
            self._finish_all()
            if self._owns_session and self._session is not None:
                await self._session.close()
            logger.info("Crawler shutdown complete")
