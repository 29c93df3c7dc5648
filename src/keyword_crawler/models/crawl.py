"""
Crawl Request/Response Models

Pydantic models for the keyword search endpoints.
"""

from typing import Literal

from pydantic import BaseModel, Field


class CrawlRequest(BaseModel):
    """Request to start a keyword search"""

    # Length is checked by the registry so the error message stays uniform
    keyword: str | None = Field(
        default=None,
        description="Keyword to search for (4-32 characters, case-insensitive)",
        examples=["security"],
    )


class CrawlCreatedResponse(BaseModel):
    """Response after a search was scheduled"""

    id: str = Field(..., description="Search identifier (8 alphanumeric characters)")


class CrawlResultResponse(BaseModel):
    """Current state of a search"""

    id: str = Field(..., description="Search identifier")
    status: Literal["active", "done"] = Field(..., description="Search status")
    urls: list[str] = Field(
        default_factory=list,
        description="Pages found to contain the keyword, in discovery order",
    )
