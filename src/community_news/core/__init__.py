"""Core domain layer."""

from community_news.core.article_cache import (
    InMemoryArticleCache,
    NullArticleCache,
    build_cache,
)
from community_news.core.entities import (
    Article,
    ArticlePage,
    DownloadResult,
    ExtractedContent,
    FeedFetchResult,
    FeedSource,
    Pagination,
    RawFeedItem,
    ResolvedImages,
)
from community_news.core.errors import (
    ArticleNotFoundError,
    InvalidPaginationError,
    NewsError,
)
from community_news.core.identity import generate_article_id
from community_news.core.interfaces import (
    ArticleCache,
    ContentExtractor,
    FeedReader,
    ImageDownloader,
)
from community_news.core.text import truncate_text

__all__ = [
    "Article",
    "ArticlePage",
    "DownloadResult",
    "ExtractedContent",
    "FeedFetchResult",
    "FeedSource",
    "Pagination",
    "RawFeedItem",
    "ResolvedImages",
    "ArticleNotFoundError",
    "InvalidPaginationError",
    "NewsError",
    "ArticleCache",
    "ContentExtractor",
    "FeedReader",
    "ImageDownloader",
    "InMemoryArticleCache",
    "NullArticleCache",
    "build_cache",
    "generate_article_id",
    "truncate_text",
]
