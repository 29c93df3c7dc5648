"""
Test configuration and fixtures for Crawler tests
"""

import os

# Set ENVIRONMENT before anything reads the configuration
os.environ.setdefault("ENVIRONMENT", "test")

import asyncio
import time
from contextlib import asynccontextmanager

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from keyword_crawler.core.config import CrawlerConfig, Environment


TEST_BASE_URL = "http://site.test/"


def _fast_config(**overrides) -> CrawlerConfig:
    values = dict(
        environment=Environment.TEST,
        base_url=TEST_BASE_URL,
        connect_timeout_sec=1.0,
        read_timeout_sec=1.0,
        max_retries=2,
        retry_backoff_sec=0.0,
        max_empty_polls=1,
        poll_interval_ms=5,
        min_workers=1,
        max_workers=4,
        job_queue_size=10,
        worker_keepalive_sec=1.0,
        shutdown_grace_sec=1.0,
    )
    values.update(overrides)
    return CrawlerConfig(**values)


@pytest.fixture
def make_config():
    """Factory for a crawler config tuned for fast tests"""
    return _fast_config


class FakeFetcher:
    """In-memory fetcher: serves ``pages`` and records every fetch"""

    def __init__(self, pages: dict[str, str], errors: dict[str, Exception] | None = None):
        self.pages = pages
        self.errors = errors or {}
        self.calls: list[str] = []

    async def fetch(self, url: str) -> str | None:
        self.calls.append(url)
        await asyncio.sleep(0)
        if url in self.errors:
            raise self.errors[url]
        return self.pages.get(url)


@pytest.fixture
def fake_fetcher():
    return FakeFetcher


def _page_handler(body: str):
    async def handler(request: web.Request) -> web.Response:
        return web.Response(text=body, content_type="text/html")

    return handler


@asynccontextmanager
async def _serve_site(pages: dict[str, str]):
    app = web.Application()
    for path, body in pages.items():
        app.router.add_get(path, _page_handler(body))

    server = TestServer(app)
    await server.start_server()
    try:
        yield str(server.make_url("/"))
    finally:
        await server.close()


@pytest.fixture
def static_site():
    """Serve a dict of path -> HTML on localhost; yields the base URL"""
    return _serve_site


async def _wait_until_done(job, timeout: float = 5.0) -> None:
    deadline = time.monotonic() + timeout
    while not job.is_done:
        if time.monotonic() > deadline:
            raise AssertionError(f"{job!r} still active after {timeout}s")
        await asyncio.sleep(0.01)


@pytest.fixture
def wait_until_done():
    return _wait_until_done
