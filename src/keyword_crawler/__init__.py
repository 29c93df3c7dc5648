"""
Keyword crawler: breadth-first search for a keyword across a single domain,
with results reported while the crawl is still running.
"""

__version__ = "1.0.0"
