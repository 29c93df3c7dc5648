"""
Link Extraction Utilities

Pulls hyperlink targets out of raw page content and keeps only those that
stay on the crawl's base host.

This is a delimiter-based scan, not an HTML parse: only ``href`` targets are
needed, so malformed markup may miss or misresolve a link.
"""

import logging
import re
from urllib.parse import urljoin, urlsplit

logger = logging.getLogger(__name__)

HREF_PATTERN = re.compile(r"""href=["'](.*?)["']""", re.IGNORECASE)

SKIP_PREFIXES = ("mailto:", "javascript:")

FETCHABLE_SCHEMES = ("http", "https")


def host_of(url: str) -> str | None:
    """Return the host used as a domain anchor, or None for malformed URLs."""
    try:
        return urlsplit(url).hostname
    except ValueError:
        return None


def resolve_link(link: str, page_url: str, base_host: str) -> str | None:
    """
    Resolve a single href target to an absolute in-domain URL.

    Args:
        link: Raw href value
        page_url: URL of the page the link was found on
        base_host: Host every crawled URL must share

    Returns:
        Absolute URL, or None if the link is empty, not http(s), off-domain
        or malformed
    """
    link = link.split("#", 1)[0]
    if not link.strip():
        return None

    try:
        absolute = link if link.startswith("http") else urljoin(page_url, link)
        parts = urlsplit(absolute)
        host = parts.hostname
    except ValueError as e:
        logger.debug(f"Discarding malformed link {link!r} on {page_url}: {e}")
        return None

    if parts.scheme not in FETCHABLE_SCHEMES or host != base_host:
        return None
    return absolute


def extract_links(content: str, page_url: str, base_host: str) -> list[str]:
    """
    Extract unique in-domain links from page content, in document order.

    Args:
        content: Raw page content
        page_url: URL of the page, for resolving relative links
        base_host: Host every returned URL must share

    Returns:
        List of absolute URLs
    """
    if not content:
        return []

    links: dict[str, None] = {}
    for match in HREF_PATTERN.finditer(content):
        link = match.group(1)
        if link.startswith(SKIP_PREFIXES):
            continue
        absolute = resolve_link(link, page_url, base_host)
        if absolute is not None:
            links.setdefault(absolute, None)
            logger.debug(f"Found link: {link} -> {absolute}")
    return list(links)
