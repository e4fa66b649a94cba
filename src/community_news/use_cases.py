"""Business logic use cases."""

import asyncio
import logging
import math
from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional

import httpx
from dateutil import parser as date_parser

from community_news.adapters.extraction import ArticleExtractor
from community_news.adapters.feeds import RSSFeedReader, is_relevant
from community_news.adapters.images import ImageResolver, LocalImageDownloader
from community_news.config import Settings
from community_news.core import (
    Article,
    ArticleCache,
    ArticleNotFoundError,
    ArticlePage,
    ContentExtractor,
    ExtractedContent,
    FeedReader,
    FeedSource,
    InvalidPaginationError,
    NullArticleCache,
    Pagination,
    RawFeedItem,
    build_cache,
    generate_article_id,
    truncate_text,
)

logger = logging.getLogger(__name__)

# Unparseable dates sort after everything else
FAR_PAST = datetime.min.replace(tzinfo=timezone.utc)

CONTENT_NOT_AVAILABLE = "Content not available"


def utc_now_iso() -> str:
    """Current time as ISO 8601 with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def parse_article_date(value: Optional[str]) -> datetime:
    """Timezone-aware datetime for sorting; FAR_PAST when unparseable."""
    if not value:
        return FAR_PAST
    try:
        parsed = date_parser.parse(value)
    except (ValueError, OverflowError, TypeError):
        return FAR_PAST
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class NewsAggregator:
    """Aggregate relevant articles from all configured feeds."""

    SNAPSHOT_KEY = "articles"

    def __init__(
        self,
        settings: Settings,
        feed_reader: FeedReader,
        image_resolver: ImageResolver,
        cache: Optional[ArticleCache] = None,
    ) -> None:
        self.settings = settings
        self.sources: tuple[FeedSource, ...] = settings.feeds.sources
        self.keywords: tuple[str, ...] = settings.feeds.keywords
        self.feed_reader = feed_reader
        self.image_resolver = image_resolver
        self.cache = cache or NullArticleCache()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "NewsAggregator":
        """Wire the default HTTP adapters from settings."""
        feed_reader = RSSFeedReader(
            max_retries=settings.feeds.max_retries,
            initial_delay=settings.feeds.initial_retry_delay,
            backoff_multiplier=settings.feeds.backoff_multiplier,
            timeout=settings.feeds.timeout,
            transport=transport,
        )
        downloader = LocalImageDownloader(
            directory=settings.images.directory,
            public_prefix=settings.images.public_prefix,
            timeout=settings.images.timeout,
            max_bytes=settings.images.max_bytes,
            allowed_subtypes=settings.images.allowed_subtypes,
            transport=transport,
        )
        image_resolver = ImageResolver(
            downloader=downloader,
            max_images=settings.images.max_images,
            page_timeout=settings.images.page_fallback_timeout,
            user_agent=settings.extraction.user_agent,
            transport=transport,
        )
        return cls(
            settings=settings,
            feed_reader=feed_reader,
            image_resolver=image_resolver,
            cache=build_cache(settings.cache.ttl_seconds),
        )

    def validate(self, page: int, limit: int) -> None:
        """Raise InvalidPaginationError for out-of-range page or limit."""
        max_limit = self.settings.aggregation.max_limit
        if page < 1:
            raise InvalidPaginationError("Invalid page number")
        if limit < 1 or limit > max_limit:
            raise InvalidPaginationError(f"Invalid limit. Must be between 1 and {max_limit}")

    async def get_articles(self, page: int = 1, limit: int = 10) -> ArticlePage:
        """Return one page of the current article snapshot."""
        self.validate(page, limit)

        articles = self.cache.get(self.SNAPSHOT_KEY)
        if articles is None:
            articles = await self.collect()
            # An empty snapshot usually means every feed was down
            if articles:
                self.cache.set(self.SNAPSHOT_KEY, articles)

        total = len(articles)
        start = (page - 1) * limit
        total_pages = math.ceil(total / limit)

        logger.info(
            "Page %d of %d (%d articles, %d with images)",
            page,
            total_pages,
            total,
            sum(1 for article in articles if article.image_url),
        )

        return ArticlePage(
            articles=articles[start:start + limit],
            pagination=Pagination(
                current_page=page,
                total_pages=total_pages,
                total_articles=total,
                articles_per_page=limit,
                has_more=page < total_pages,
            ),
        )

    async def collect(self) -> list[Article]:
        """Fetch every source concurrently and return the sorted, capped snapshot."""
        logger.info("Fetching from %d feeds", len(self.sources))

        results = await asyncio.gather(
            *(self._collect_source(source) for source in self.sources),
            return_exceptions=True,
        )

        articles: list[Article] = []
        for source, result in zip(self.sources, results):
            if isinstance(result, BaseException):
                logger.error("Error processing feed %s: %s", source.url, result)
                continue
            articles.extend(result)

        logger.info("Total articles collected: %d", len(articles))

        articles.sort(key=lambda article: parse_article_date(article.date), reverse=True)
        return articles[:self.settings.aggregation.max_articles]

    async def _collect_source(self, source: FeedSource) -> list[Article]:
        result = await self.feed_reader.fetch(source.url)
        if not result.items:
            logger.info("No items found in feed %s", source.name)
            return []

        relevant = [item for item in result.items if is_relevant(item, self.keywords)]
        logger.info("Found %d relevant articles in %s", len(relevant), source.name)

        built = await asyncio.gather(
            *(self.build_article(item, source) for item in relevant),
            return_exceptions=True,
        )

        articles = []
        for item, article in zip(relevant, built):
            if isinstance(article, BaseException):
                logger.warning("Skipping article %r from %s: %s", item.title, source.name, article)
                continue
            articles.append(article)
        return articles

    async def build_article(self, item: RawFeedItem, source: FeedSource) -> Article:
        """Turn a relevant feed item into an Article, resolving its images."""
        article_url = item.link
        article_id = generate_article_id(item.title, article_url)

        resolved = await self.image_resolver.resolve(item, article_url or None)

        return Article(
            id=article_id,
            title=item.title or "Untitled Article",
            description=truncate_text(
                item.content_snippet or item.content,
                self.settings.aggregation.description_length,
            ),
            content=item.content or item.content_snippet or item.description,
            url=self.settings.article_url(article_id),
            original_url=article_url,
            image_url=resolved.primary or resolved.local_path,
            images=resolved.images,
            source=source.name,
            date=item.iso_date or item.pub_date or utc_now_iso(),
            author=item.author or source.name,
            categories=list(item.categories),
        )


class ArticleLookupService:
    """Resolve an article by id and enrich it with extracted full content."""

    def __init__(
        self,
        aggregator: NewsAggregator,
        extractor: ContentExtractor,
        settings: Settings,
    ) -> None:
        self.aggregator = aggregator
        self.extractor = extractor
        self.settings = settings

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        aggregator: NewsAggregator,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "ArticleLookupService":
        extractor = ArticleExtractor(
            timeout=settings.extraction.timeout,
            user_agent=settings.extraction.user_agent,
            known_sources=settings.extraction.known_sources,
            min_paragraph_length=settings.extraction.min_paragraph_length,
            max_fallback_paragraphs=settings.extraction.max_fallback_paragraphs,
            max_images=settings.extraction.max_images,
            transport=transport,
        )
        return cls(aggregator=aggregator, extractor=extractor, settings=settings)

    @property
    def _page_size(self) -> int:
        return self.settings.aggregation.max_limit

    async def lookup(self, article_id: str, known_url: Optional[str] = None) -> Article:
        """
        Find an article and merge in its full content.

        Args:
            article_id: Id as generated by the aggregator
            known_url: Original article URL, when the caller has it

        Returns:
            Article with extracted content

        Raises:
            ArticleNotFoundError: No URL given and no listed article has this id
        """
        logger.info("Looking up article %s (url: %s)", article_id, known_url or "not provided")

        if known_url:
            metadata = await self._find_metadata(article_id, known_url)
            extracted = await self.extractor.extract(known_url)
            if metadata is not None:
                return self._merge(metadata, extracted, article_id, known_url)
            return self._from_extracted(article_id, known_url, extracted)

        article = await self._search(article_id)
        if article is None:
            logger.info("Article %s not found", article_id)
            raise ArticleNotFoundError()

        if not article.original_url:
            # Nothing to scrape; serve what the feed gave us
            return replace(
                article,
                url=self.settings.article_url(article_id),
                content=article.content or article.description or CONTENT_NOT_AVAILABLE,
            )

        extracted = await self.extractor.extract(article.original_url)
        return self._merge(article, extracted, article_id, article.original_url)

    async def _find_metadata(self, article_id: str, known_url: str) -> Optional[Article]:
        """Best-effort scan of the first listing pages for feed metadata."""
        try:
            for page in range(1, self.settings.lookup.metadata_search_pages + 1):
                listing = await self.aggregator.get_articles(page, self._page_size)
                if not listing.articles:
                    break

                for article in listing.articles:
                    if article.id == article_id or article.original_url == known_url:
                        logger.info("Found metadata for %s on page %d", article_id, page)
                        return article

                if not listing.pagination.has_more:
                    break
        except Exception as e:
            logger.warning("Error searching for article metadata: %s", e)

        return None

    async def _search(self, article_id: str) -> Optional[Article]:
        """Page through the listing for an exact id match."""
        for page in range(1, self.settings.lookup.max_search_pages + 1):
            try:
                listing = await self.aggregator.get_articles(page, self._page_size)
            except Exception as e:
                logger.warning("Error fetching listing page %d: %s", page, e)
                continue

            for article in listing.articles:
                if article.id == article_id:
                    return article

            if not listing.pagination.has_more:
                break

        return None

    def _merge(
        self,
        article: Article,
        extracted: ExtractedContent,
        article_id: str,
        original_url: str,
    ) -> Article:
        # "Unknown" only means extraction could not name the publisher
        source = extracted.source if extracted.source and extracted.source != "Unknown" else article.source

        return replace(
            article,
            id=article_id,
            content=extracted.content or article.content or article.description,
            title=extracted.title or article.title,
            description=extracted.description or article.description,
            author=extracted.author or article.author or article.source,
            source=source,
            date=extracted.date or article.date,
            images=extracted.images or article.images,
            url=self.settings.article_url(article_id),
            original_url=original_url,
        )

    def _from_extracted(
        self,
        article_id: str,
        original_url: str,
        extracted: ExtractedContent,
    ) -> Article:
        return Article(
            id=article_id,
            title=extracted.title or "Article",
            description=extracted.description,
            content=extracted.content,
            url=self.settings.article_url(article_id),
            original_url=original_url,
            image_url=extracted.images[0] if extracted.images else None,
            images=list(extracted.images),
            source=extracted.source or "Unknown",
            date=extracted.date or utc_now_iso(),
            author=extracted.author,
            categories=[],
        )
