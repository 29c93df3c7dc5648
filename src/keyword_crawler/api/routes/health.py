"""
Health Check Router

Provides Kubernetes-compatible health check endpoints:
- /health: Simple health for load balancers
- /health/live: Liveness probe (process alive)
- /health/ready: Readiness probe (accepting searches)
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from keyword_crawler.api.deps import get_registry
from keyword_crawler.services.registry import JobRegistry

router = APIRouter()


@router.get("/health")
async def health():
    """Simple health check for load balancers."""
    return {"status": "ok"}


@router.get("/health/live")
async def liveness():
    """Kubernetes liveness probe - is the process running?"""
    return {"status": "ok"}


@router.get("/health/ready")
async def readiness(registry: JobRegistry = Depends(get_registry)):
    """Kubernetes readiness probe - can the crawler take new searches?"""
    checks = {"worker_pool": "ok" if registry.accepting else "unavailable"}
    ready = all(v == "ok" for v in checks.values())

    return JSONResponse(
        status_code=200 if ready else 503,
        content={"status": "ok" if ready else "unhealthy", "checks": checks},
    )
