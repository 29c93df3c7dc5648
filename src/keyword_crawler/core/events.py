"""
Application Lifecycle Events

Manages FastAPI lifespan events for startup and shutdown.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
import logging

from keyword_crawler.services.registry import JobRegistry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager

    Handles startup and shutdown events:
    - Startup: Build the job registry (HTTP session + worker pool)
    - Shutdown: Finish every search and stop the workers within the grace period
    """
    config = app.state.config
    logger.info(f"🚀 Starting {config.app_name} (base URL: {config.base_url})...")

    registry = JobRegistry(config)
    await registry.start()
    app.state.registry = registry
    logger.info("✅ Job registry ready")

    try:
        yield  # Application runs here
    finally:
        logger.info("🛑 Shutting down crawler...")
        await registry.shutdown()
        logger.info("✅ Shutdown complete")
