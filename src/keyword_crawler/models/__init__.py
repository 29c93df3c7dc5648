"""
Models package initialization
"""

from keyword_crawler.models.crawl import (
    CrawlRequest,
    CrawlCreatedResponse,
    CrawlResultResponse,
)
from keyword_crawler.models.stats import CrawlerStats

__all__ = [
    "CrawlRequest",
    "CrawlCreatedResponse",
    "CrawlResultResponse",
    "CrawlerStats",
]
