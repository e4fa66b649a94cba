"""Core domain entities."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class FeedSource:
    """Configured RSS/Atom feed."""

    url: str
    name: str

    def __post_init__(self) -> None:
        if not self.url:
            raise ValueError("Feed URL cannot be empty")
        if not self.name:
            raise ValueError("Feed name cannot be empty")


@dataclass
class RawFeedItem:
    """One parsed feed entry, before relevance filtering and enrichment."""

    title: str = ""
    link: str = ""
    content: str = ""
    content_snippet: str = ""
    description: str = ""
    pub_date: str = ""
    iso_date: str = ""
    enclosure_url: Optional[str] = None
    media_content: list[str] = field(default_factory=list)
    media_thumbnail: list[str] = field(default_factory=list)
    itunes_image: Optional[str] = None
    author: str = ""
    categories: list[str] = field(default_factory=list)


@dataclass
class FeedFetchResult:
    """Outcome of fetching one feed.

    A failed fetch carries an empty item list and the last error, so callers
    can treat an unreachable feed as "no items" without catching anything.
    """

    url: str
    items: list[RawFeedItem]
    attempts: int
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class DownloadResult:
    """Outcome of an image download."""

    url: str
    local_path: Optional[str] = None
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.local_path is not None


@dataclass
class ResolvedImages:
    """Images found for one feed item."""

    primary: Optional[str] = None
    images: list[str] = field(default_factory=list)
    local_path: Optional[str] = None


@dataclass
class Article:
    """Aggregated article as served by the listing and detail endpoints."""

    id: str
    title: str
    description: str
    content: str
    url: str
    original_url: str
    image_url: Optional[str]
    images: list[str]
    source: str
    date: str
    author: str
    categories: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON shape used by the HTTP API."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "content": self.content,
            "url": self.url,
            "originalUrl": self.original_url,
            "imageUrl": self.image_url,
            "images": list(self.images),
            "source": self.source,
            "date": self.date,
            "author": self.author,
            "categories": list(self.categories),
        }


@dataclass
class Pagination:
    """Pagination block of a listing response."""

    current_page: int
    total_pages: int
    total_articles: int
    articles_per_page: int
    has_more: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "currentPage": self.current_page,
            "totalPages": self.total_pages,
            "totalArticles": self.total_articles,
            "articlesPerPage": self.articles_per_page,
            "hasMore": self.has_more,
        }


@dataclass
class ArticlePage:
    """One page of aggregated articles."""

    articles: list[Article]
    pagination: Pagination

    def to_dict(self) -> dict[str, Any]:
        return {
            "articles": [article.to_dict() for article in self.articles],
            "pagination": self.pagination.to_dict(),
        }


EXTRACTION_EMPTY_CONTENT = (
    "Full article content could not be extracted. "
    "Please visit the original source for complete article."
)
EXTRACTION_UNAVAILABLE_CONTENT = (
    "Unable to fetch full article content. "
    "Please visit the original source for complete article."
)


@dataclass
class ExtractedContent:
    """Result of scraping an external article page."""

    content: str
    title: str = ""
    author: str = ""
    source: str = ""
    date: str = ""
    description: str = ""
    images: list[str] = field(default_factory=list)

    @classmethod
    def unavailable(cls) -> "ExtractedContent":
        """Fallback returned when the page could not be fetched or parsed."""
        return cls(content=EXTRACTION_UNAVAILABLE_CONTENT, source="Unknown")
