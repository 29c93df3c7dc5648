"""
Crawl Frontier

Per-job FIFO of discovered-but-unfetched URLs. Owned by a single traversal
task; never shared across jobs.
"""

from collections import deque
from typing import Iterable, Optional


class Frontier:
    """
    Breadth-first frontier with pending/visited bookkeeping.

    ``pending`` mirrors queue membership so a URL is never queued twice while
    in flight; ``visited`` holds every URL already dequeued for fetching.
    """

    def __init__(self, seed: str):
        self._queue: deque[tuple[str, int]] = deque([(seed, 0)])
        self._pending: set[str] = {seed}
        self._visited: set[str] = set()

    def __len__(self) -> int:
        return len(self._queue)

    def __bool__(self) -> bool:
        return bool(self._queue)

    @property
    def visited_count(self) -> int:
        return len(self._visited)

    def is_visited(self, url: str) -> bool:
        return url in self._visited

    def is_pending(self, url: str) -> bool:
        return url in self._pending

    def pop(self) -> Optional[tuple[str, int]]:
        """Dequeue the oldest (url, depth) entry, or None if empty."""
        if not self._queue:
            return None
        url, depth = self._queue.popleft()
        self._pending.discard(url)
        return url, depth

    def mark_visited(self, url: str) -> bool:
        """Record a fetch of ``url``. Returns False if it was already visited."""
        if url in self._visited:
            return False
        self._visited.add(url)
        return True

    def push(self, url: str, depth: int) -> bool:
        if self.is_visited(url) or self.is_pending(url):
            return False
        self._queue.append((url, depth))
        self._pending.add(url)
        return True

    def extend(self, urls: Iterable[str], depth: int) -> int:
        """Enqueue every URL not yet visited or pending. Returns the count added."""
        return sum(1 for url in urls if self.push(url, depth))
