"""
Stats Router

Job and worker pool statistics for dashboards.
"""

from fastapi import APIRouter, Depends

from keyword_crawler.api.deps import get_registry
from keyword_crawler.models.stats import CrawlerStats
from keyword_crawler.services.registry import JobRegistry

router = APIRouter()


@router.get("/stats", response_model=CrawlerStats)
async def get_stats(registry: JobRegistry = Depends(get_registry)):
    """Return job counts and worker pool status in a single response."""
    return CrawlerStats(**registry.stats())
