"""
Crawl Job State

The mutable record of one keyword crawl: its status and the URLs found to
contain the keyword. A single traversal task writes to a job while any number
of API readers poll it.

Writers serialise on a lock and publish a fresh immutable state with one
reference assignment, so readers never need the lock and never see a status
that disagrees with the result list.
"""

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class JobStatus(str, Enum):
    """Crawl job lifecycle. Transitions only move forward."""

    ACTIVE = "active"
    DONE = "done"


_STATUS_ORDER = {JobStatus.ACTIVE: 0, JobStatus.DONE: 1}


@dataclass(frozen=True)
class _State:
    status: JobStatus
    urls: tuple[str, ...]
    updated_at: float


@dataclass(frozen=True)
class JobSnapshot:
    """Consistent point-in-time view of a job."""

    id: str
    keyword: str
    status: JobStatus
    urls: list[str]
    updated_at: float


class Job:
    """One keyword-scoped crawl request and its accumulated matches."""

    def __init__(self, job_id: str, keyword: str, max_results: int | None = None):
        self._id = job_id
        self._keyword = keyword
        self._max_results = max_results
        self._lock = threading.Lock()
        self._seen: set[str] = set()
        self.created_at = time.time()
        self._state = _State(JobStatus.ACTIVE, (), self.created_at)

    @property
    def id(self) -> str:
        return self._id

    @property
    def keyword(self) -> str:
        return self._keyword

    @property
    def max_results(self) -> int | None:
        return self._max_results

    @property
    def status(self) -> JobStatus:
        return self._state.status

    @property
    def is_done(self) -> bool:
        return self._state.status is JobStatus.DONE

    @property
    def updated_at(self) -> float:
        return self._state.updated_at

    @property
    def match_count(self) -> int:
        """Total matches recorded, including any beyond the visible cap."""
        return len(self._state.urls)

    @property
    def cap_reached(self) -> bool:
        if self._max_results is None:
            return False
        return len(self._state.urls) >= self._max_results

    def add_match(self, url: str) -> bool:
        """
        Record a matching URL.

        Returns False (and leaves the job untouched) if the URL was already
        recorded.
        """
        with self._lock:
            if url in self._seen:
                return False
            self._seen.add(url)
            state = self._state
            self._state = _State(state.status, state.urls + (url,), time.time())
            return True

    def set_status(self, status: JobStatus) -> bool:
        """Move the job forward to ``status``; backwards moves are ignored."""
        with self._lock:
            state = self._state
            if _STATUS_ORDER[status] < _STATUS_ORDER[state.status]:
                logger.debug(f"Ignoring status regression {state.status.value} -> {status.value} for job {self._id}")
                return False
            if status is state.status:
                return False
            self._state = _State(status, state.urls, time.time())
            logger.debug(f"Job {self._id} status set to {status.value}")
            return True

    def mark_done(self) -> bool:
        return self.set_status(JobStatus.DONE)

    def _visible(self, urls: tuple[str, ...]) -> list[str]:
        if self._max_results is None or len(urls) <= self._max_results:
            return list(urls)
        return list(urls[: self._max_results])

    def snapshot_matches(self) -> list[str]:
        """Matched URLs in discovery order, capped when result limiting is on."""
        return self._visible(self._state.urls)

    def snapshot(self) -> JobSnapshot:
        state = self._state
        return JobSnapshot(
            id=self._id,
            keyword=self._keyword,
            status=state.status,
            urls=self._visible(state.urls),
            updated_at=state.updated_at,
        )

    def __repr__(self) -> str:
        return f"Job(id={self._id!r}, keyword={self._keyword!r}, status={self.status.value})"
