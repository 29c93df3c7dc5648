"""
Main Application Entry Point

FastAPI application factory and router registration.
"""

import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from keyword_crawler.api.middleware.request_logging import RequestLoggingMiddleware
from keyword_crawler.api.routes import crawl, health, stats
from keyword_crawler.core.config import CrawlerConfig, Environment
from keyword_crawler.core.events import lifespan

logger = logging.getLogger(__name__)


async def _invalid_request_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Invalid request {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"detail": "Invalid request body"})


def create_app(config: CrawlerConfig | None = None) -> FastAPI:
    """
    FastAPI application factory

    Creates and configures the FastAPI application with all routers.
    The configuration is read from the environment unless one is given.
    """
    config = config or CrawlerConfig.from_env()

    app = FastAPI(
        title=config.app_name,
        version=config.app_version,
        description="Keyword search over a single crawled domain",
        lifespan=lifespan,
        debug=config.environment is Environment.DEVELOPMENT,
    )
    app.state.config = config

    app.add_middleware(RequestLoggingMiddleware)
    app.add_exception_handler(RequestValidationError, _invalid_request_handler)

    app.include_router(health.router, tags=["health"])
    app.include_router(crawl.router, tags=["crawl"])
    app.include_router(stats.router, tags=["stats"])

    return app


def run() -> None:
    """Run the service with uvicorn."""
    config = CrawlerConfig.from_env()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info("=== Keyword Crawler Starting ===")
    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    run()
