"""
Crawl Router

Start keyword searches and poll their results.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from keyword_crawler.api.deps import get_registry
from keyword_crawler.core.exceptions import InvalidKeyword, PoolSaturated
from keyword_crawler.models.crawl import (
    CrawlCreatedResponse,
    CrawlRequest,
    CrawlResultResponse,
)
from keyword_crawler.services.registry import JobRegistry

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/crawl", response_model=CrawlCreatedResponse)
async def start_search(
    request: CrawlRequest,
    registry: JobRegistry = Depends(get_registry),
):
    """
    Start a keyword search

    The crawl runs in the background; poll GET /crawl/{id} for results.
    """
    try:
        job = registry.submit(request.keyword)
    except InvalidKeyword as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PoolSaturated as e:
        raise HTTPException(status_code=503, detail=str(e))

    logger.info(f"Search initiated successfully - ID: {job.id}")
    return CrawlCreatedResponse(id=job.id)


@router.get("/crawl/{job_id}", response_model=CrawlResultResponse)
async def get_search(job_id: str, registry: JobRegistry = Depends(get_registry)):
    """Get the status and matched URLs of a search"""
    job = registry.lookup(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Search not found")

    snapshot = job.snapshot()
    return CrawlResultResponse(
        id=snapshot.id,
        status=snapshot.status.value,
        urls=snapshot.urls,
    )
