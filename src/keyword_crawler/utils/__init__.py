"""
Utilities package initialization
"""

from keyword_crawler.utils.links import extract_links, host_of, resolve_link

__all__ = ["extract_links", "host_of", "resolve_link"]
