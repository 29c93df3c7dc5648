"""
API Dependencies

Dependency injection for FastAPI routes.
"""

from fastapi import Request

from keyword_crawler.services.registry import JobRegistry


def get_registry(request: Request) -> JobRegistry:
    """Get the job registry created during application startup"""
    return request.app.state.registry
