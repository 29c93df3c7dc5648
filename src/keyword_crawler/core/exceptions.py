"""
Crawler Errors

Errors surfaced synchronously to whoever submits a search. Per-page fetch
failures and shutdown are not errors and never raise past the engine.
"""

KEYWORD_MIN_LENGTH = 4
KEYWORD_MAX_LENGTH = 32
KEYWORD_ERROR = f"Keyword must be between {KEYWORD_MIN_LENGTH} and {KEYWORD_MAX_LENGTH} characters."


class CrawlerError(Exception):
    """Base class for errors surfaced to job submitters."""


class InvalidKeyword(CrawlerError):
    """Keyword missing or outside the allowed length range."""

    def __init__(self, message: str = KEYWORD_ERROR):
        super().__init__(message)


class PoolSaturated(CrawlerError):
    """The worker pool cannot accept more work right now."""
