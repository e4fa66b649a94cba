"""Article snapshot caches."""

import time
from typing import Callable, Optional

from community_news.core.entities import Article
from community_news.core.interfaces import ArticleCache


class NullArticleCache(ArticleCache):
    """Cache that never stores anything, so every request re-fetches feeds."""

    def get(self, key: str) -> Optional[list[Article]]:
        return None

    def set(self, key: str, articles: list[Article]) -> None:
        return None


class InMemoryArticleCache(ArticleCache):
    """Time-boxed in-process cache."""

    def __init__(
        self,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, list[Article]]] = {}

    def get(self, key: str) -> Optional[list[Article]]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        stored_at, articles = entry
        if self._clock() - stored_at > self.ttl_seconds:
            del self._entries[key]
            return None

        return list(articles)

    def set(self, key: str, articles: list[Article]) -> None:
        self._entries[key] = (self._clock(), list(articles))

    def clear(self) -> None:
        """Drop all entries."""
        self._entries.clear()


def build_cache(ttl_seconds: float) -> ArticleCache:
    """Pick the cache implementation for a configured TTL (0 disables caching)."""
    if ttl_seconds and ttl_seconds > 0:
        return InMemoryArticleCache(ttl_seconds)
    return NullArticleCache()
