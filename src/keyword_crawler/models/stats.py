"""
Crawler Stats Models

Pydantic models for job and worker pool statistics.
"""

from typing import Literal

from pydantic import BaseModel, Field


class CrawlerStats(BaseModel):
    """Aggregated job and worker pool figures"""

    jobs_total: int = Field(default=0, ge=0, description="Searches registered since start")
    jobs_active: int = Field(default=0, ge=0, description="Searches still crawling")
    jobs_done: int = Field(default=0, ge=0, description="Searches finished")
    pool_status: Literal["running", "stopped"] = Field(..., description="Worker pool status")
    workers: int = Field(default=0, ge=0, description="Live worker tasks")
    active_tasks: int = Field(default=0, ge=0, description="Workers currently crawling")
    queued: int = Field(default=0, ge=0, description="Searches waiting for a worker")
    min_workers: int = Field(..., ge=1, description="Core pool size")
    max_workers: int = Field(..., ge=1, description="Maximum pool size")
    uptime_seconds: float | None = Field(
        default=None, ge=0, description="Pool uptime in seconds (None if stopped)"
    )
