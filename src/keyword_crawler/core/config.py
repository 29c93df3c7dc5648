"""
Crawler Service Configuration

A single explicit configuration value, built once at process start and
handed to the JobRegistry (and from there to the engine, fetcher and pool).
"""

import os
from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlsplit


class Environment(str, Enum):
    """Application environment"""

    PRODUCTION = "production"
    DEVELOPMENT = "development"
    TEST = "test"


def _get_environment() -> Environment:
    """Get and validate ENVIRONMENT variable."""
    env_value = os.getenv("ENVIRONMENT", Environment.DEVELOPMENT.value)
    try:
        return Environment(env_value.lower())
    except ValueError:
        raise RuntimeError(
            f"Invalid ENVIRONMENT value: '{env_value}'. "
            "Must be 'production', 'development', or 'test'."
        )


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"Invalid integer for {name}: '{raw}'")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"Invalid number for {name}: '{raw}'")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class CrawlerConfig:
    """Crawler service configuration"""

    # Application
    app_name: str = "Keyword Crawler"
    app_version: str = "1.0.0"
    environment: Environment = Environment.DEVELOPMENT
    host: str = "0.0.0.0"
    port: int = 4567
    log_level: str = "INFO"

    # Crawl root and domain anchor
    base_url: str = "http://hiring.axreng.com/"
    max_depth: int = 50

    # Fetcher
    connect_timeout_sec: float = 3.0
    read_timeout_sec: float = 5.0
    user_agent: str = "KeywordCrawler/1.0 (+https://example.local/; keyword search)"
    max_retries: int = 3
    retry_backoff_sec: float = 1.0
    max_response_bytes: int = 10 * 1024 * 1024

    # Result limiting (early stop)
    limit_results: bool = True
    max_results: int = 100

    # Traversal loop
    max_empty_polls: int = 50
    poll_interval_ms: int = 100
    # Exploration ceiling on the visited set
    max_visited: int = 500

    # Worker pool
    min_workers: int = 4
    max_workers: int = 20
    job_queue_size: int = 100
    worker_keepalive_sec: float = 60.0
    shutdown_grace_sec: float = 5.0

    def __post_init__(self):
        parts = urlsplit(self.base_url)
        if parts.scheme not in ("http", "https") or not parts.hostname:
            raise ValueError(f"Base URL must be an absolute http(s) URL: '{self.base_url}'")
        if self.min_workers < 1 or self.max_workers < self.min_workers:
            raise ValueError(
                f"Invalid worker bounds [{self.min_workers}, {self.max_workers}]"
            )
        if self.max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        if self.max_results < 1 or self.max_visited < 1 or self.max_depth < 0:
            raise ValueError("max_results, max_visited and max_depth must be positive")
        if self.job_queue_size < 0 or self.max_empty_polls < 0:
            raise ValueError("job_queue_size and max_empty_polls cannot be negative")

    @property
    def result_cap(self) -> int | None:
        """Visible result cap, or None when result limiting is disabled."""
        return self.max_results if self.limit_results else None

    @classmethod
    def from_env(cls) -> "CrawlerConfig":
        """Build configuration from environment variables over the defaults."""
        try:
            return cls(
                environment=_get_environment(),
                host=os.getenv("HOST", cls.host),
                port=_env_int("PORT", cls.port),
                log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
                base_url=os.getenv("BASE_URL", cls.base_url),
                max_depth=_env_int("CRAWL_MAX_DEPTH", cls.max_depth),
                connect_timeout_sec=_env_float(
                    "CRAWL_CONNECT_TIMEOUT_SEC", cls.connect_timeout_sec
                ),
                read_timeout_sec=_env_float("CRAWL_READ_TIMEOUT_SEC", cls.read_timeout_sec),
                user_agent=os.getenv("CRAWL_USER_AGENT", cls.user_agent),
                max_retries=_env_int("CRAWL_MAX_RETRIES", cls.max_retries),
                retry_backoff_sec=_env_float("CRAWL_RETRY_BACKOFF_SEC", cls.retry_backoff_sec),
                max_response_bytes=_env_int(
                    "CRAWL_MAX_RESPONSE_BYTES", cls.max_response_bytes
                ),
                limit_results=_env_bool("CRAWL_LIMIT_RESULTS", cls.limit_results),
                max_results=_env_int("CRAWL_MAX_RESULTS", cls.max_results),
                max_empty_polls=_env_int("CRAWL_MAX_EMPTY_POLLS", cls.max_empty_polls),
                poll_interval_ms=_env_int("CRAWL_POLL_INTERVAL_MS", cls.poll_interval_ms),
                max_visited=_env_int("CRAWL_MAX_VISITED", cls.max_visited),
                min_workers=_env_int("CRAWL_WORKERS_MIN", cls.min_workers),
                max_workers=_env_int("CRAWL_WORKERS_MAX", cls.max_workers),
                job_queue_size=_env_int("CRAWL_JOB_QUEUE_SIZE", cls.job_queue_size),
                worker_keepalive_sec=_env_float(
                    "CRAWL_WORKER_KEEPALIVE_SEC", cls.worker_keepalive_sec
                ),
                shutdown_grace_sec=_env_float(
                    "CRAWL_SHUTDOWN_GRACE_SEC", cls.shutdown_grace_sec
                ),
            )
        except ValueError as e:
            raise RuntimeError(f"Invalid crawler configuration: {e}") from e
