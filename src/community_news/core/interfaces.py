"""Core interfaces for adapters."""

from abc import ABC, abstractmethod
from typing import Optional

from community_news.core.entities import (
    Article,
    DownloadResult,
    ExtractedContent,
    FeedFetchResult,
)


class FeedReader(ABC):
    """Interface for retrieving and parsing one feed."""

    @abstractmethod
    async def fetch(self, url: str) -> FeedFetchResult:
        """Fetch a feed; failures are reported in the result, not raised."""
        pass


class ImageDownloader(ABC):
    """Interface for persisting remote images locally."""

    @abstractmethod
    async def download(self, url: str) -> DownloadResult:
        """Download an image; failures are reported in the result, not raised."""
        pass


class ContentExtractor(ABC):
    """Interface for scraping the full content of an external article."""

    @abstractmethod
    async def extract(self, url: str) -> ExtractedContent:
        """Extract article fields from a page. Never raises."""
        pass


class ArticleCache(ABC):
    """Interface for caching aggregated article snapshots."""

    @abstractmethod
    def get(self, key: str) -> Optional[list[Article]]:
        """Return cached articles, or None on miss or expiry."""
        pass

    @abstractmethod
    def set(self, key: str, articles: list[Article]) -> None:
        """Store articles under key."""
        pass
