"""
Crawl Engine

Breadth-first traversal for a single keyword job: pull a URL from the
frontier, fetch it, check it for the keyword, enqueue its in-domain links,
repeat until the frontier drains, the result cap is hit, or the job is
cancelled. Whatever ends the loop, the job finishes DONE.
"""

import asyncio
import logging
import re
import time
from typing import Protocol

from keyword_crawler.core.config import CrawlerConfig
from keyword_crawler.domain.frontier import Frontier
from keyword_crawler.domain.job import Job
from keyword_crawler.utils.links import extract_links, host_of

logger = logging.getLogger(__name__)


class PageFetcher(Protocol):
    async def fetch(self, url: str) -> str | None: ...


def keyword_matcher(keyword: str) -> re.Pattern:
    """Case-insensitive literal matcher for ``keyword``."""
    return re.compile(re.escape(keyword), re.IGNORECASE)


class CrawlEngine:
    """Runs one job's traversal at a time; safe to share across jobs."""

    def __init__(self, config: CrawlerConfig, fetcher: PageFetcher):
        self.fetcher = fetcher
        self.base_url = config.base_url
        self.base_host = host_of(config.base_url)
        self.max_depth = config.max_depth
        self.max_visited = config.max_visited
        self.max_empty_polls = config.max_empty_polls
        self.poll_interval = config.poll_interval_ms / 1000.0

    async def run(self, job: Job) -> None:
        """Crawl from the base URL until a termination condition fires."""
        started = time.monotonic()
        processed = 0
        matcher = keyword_matcher(job.keyword)
        frontier = Frontier(self.base_url)
        empty_polls = 0

        logger.info(f"Crawl execution started [id={job.id}, keyword={job.keyword}]")

        try:
            while (frontier or empty_polls < self.max_empty_polls) and not job.is_done:
                entry = frontier.pop()
                if entry is None:
                    await asyncio.sleep(self.poll_interval)
                    empty_polls += 1
                    continue

                empty_polls = 0
                url, depth = entry
                if not frontier.mark_visited(url):
                    continue

                processed += 1
                try:
                    if await self._process(job, frontier, matcher, url, depth):
                        logger.info(
                            f"Max results ({job.max_results}) reached for search id={job.id}, stopping crawl"
                        )
                        break
                except Exception as e:
                    logger.warning(f"Error processing {url} : {e}")

            logger.info(
                f"Crawl completed [id={job.id}, duration={time.monotonic() - started:.2f}s, "
                f"urls={job.match_count}, processed={processed}]"
            )
        except asyncio.CancelledError:
            logger.warning(f"Search interrupted [id={job.id}, processed={processed}]")
            raise
        finally:
            job.mark_done()

    async def _process(
        self,
        job: Job,
        frontier: Frontier,
        matcher: re.Pattern,
        url: str,
        depth: int,
    ) -> bool:
        """Fetch and handle one page. Returns True when the job should stop early."""
        logger.debug(f"Crawling URL: {url}")
        content = await self.fetcher.fetch(url)
        if content is None:
            return False

        matched = matcher.search(content) is not None
        if matched:
            if job.add_match(url):
                logger.info(f"Found match [url={url}, keyword={job.keyword}]")
            if job.cap_reached:
                job.mark_done()
                return True

        if (matched or frontier.visited_count < self.max_visited) and depth < self.max_depth:
            links = extract_links(content, url, self.base_host)
            added = frontier.extend(links, depth + 1)
            if added:
                logger.debug(f"Added {added} new links from {url}")

        return False
