"""
Fetcher Service

Retrieves raw page content over HTTP with bounded retries and backoff.
A failed fetch is an expected per-URL outcome: it returns None instead of
raising, so one bad page never aborts a crawl.
"""

import asyncio
import logging
from typing import Awaitable, Callable

import aiohttp
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_incrementing,
)

from keyword_crawler.core.config import CrawlerConfig

logger = logging.getLogger(__name__)

RETRYABLE_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError)

READ_CHUNK_SIZE = 64 * 1024


def create_session(config: CrawlerConfig) -> aiohttp.ClientSession:
    """Create the shared HTTP session (timeouts, user agent, connection limits)."""
    timeout = aiohttp.ClientTimeout(
        sock_connect=config.connect_timeout_sec,
        sock_read=config.read_timeout_sec,
    )
    connector = aiohttp.TCPConnector(
        limit=config.max_workers * 2,
        ttl_dns_cache=300,
        enable_cleanup_closed=True,
    )
    return aiohttp.ClientSession(
        headers={"User-Agent": config.user_agent},
        timeout=timeout,
        connector=connector,
    )


class Fetcher:
    """HTTP GET with retry (backoff grows linearly with the attempt number)."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        *,
        max_retries: int = 3,
        backoff_base_sec: float = 1.0,
        max_response_bytes: int = 10 * 1024 * 1024,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.session = session
        self.sleep = sleep
        self.max_retries = max_retries
        self.backoff_base_sec = backoff_base_sec
        self.max_response_bytes = max_response_bytes

    @classmethod
    def from_config(cls, session: aiohttp.ClientSession, config: CrawlerConfig) -> "Fetcher":
        return cls(
            session,
            max_retries=config.max_retries,
            backoff_base_sec=config.retry_backoff_sec,
            max_response_bytes=config.max_response_bytes,
        )

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        url = retry_state.args[0] if retry_state.args else "?"
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            f"Attempt {retry_state.attempt_number} - Error fetching content from {url}: {error}"
        )

    async def _get(self, url: str) -> str | None:
        async with self.session.get(url, allow_redirects=True) as resp:
            resp.raise_for_status()
            chunks: list[bytes] = []
            size = 0
            async for chunk in resp.content.iter_chunked(READ_CHUNK_SIZE):
                chunks.append(chunk)
                size += len(chunk)
                if size > self.max_response_bytes:
                    logger.debug(f"Response truncated at {self.max_response_bytes} bytes: {url}")
                    break
            body = b"".join(chunks)[: self.max_response_bytes]
            if not body:
                return None
            return body.decode("utf-8", errors="replace")

    async def fetch(self, url: str) -> str | None:
        """
        Fetch ``url`` and return its body decoded as UTF-8.

        Returns None once every attempt has failed or the body is empty.
        Cancellation (including during a backoff sleep) propagates.
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_incrementing(start=self.backoff_base_sec, increment=self.backoff_base_sec),
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            before_sleep=self._log_retry,
            reraise=True,
            sleep=self.sleep,
        )
        try:
            return await retrying(self._get, url)
        except RETRYABLE_ERRORS as e:
            logger.warning(f"Giving up on {url} after {self.max_retries} attempts: {e}")
            return None
