"""Shared fixtures."""

from pathlib import Path
from typing import Iterable, Optional

import httpx
import pytest

from community_news.adapters.images import ImageResolver
from community_news.config import AggregationConfig, FeedsConfig, ImagesConfig, Settings
from community_news.core import FeedFetchResult, FeedReader, FeedSource, RawFeedItem

SITE_URL = "https://site.test"

SOURCES = (
    FeedSource(url="https://feeds.test/cbs.xml", name="CBS News"),
    FeedSource(url="https://feeds.test/npr.xml", name="NPR"),
    FeedSource(url="https://feeds.test/nbc.xml", name="NBC News"),
    FeedSource(url="https://feeds.test/latimes.xml", name="LA Times"),
)

KEYWORDS = ("safety", "crime", "community")


class StubFeedReader(FeedReader):
    """Serves canned items per feed URL and records calls."""

    def __init__(
        self,
        feeds: dict[str, list[RawFeedItem]],
        failing: Iterable[str] = (),
    ) -> None:
        self.feeds = feeds
        self.failing = set(failing)
        self.calls: list[str] = []

    async def fetch(self, url: str) -> FeedFetchResult:
        self.calls.append(url)
        if url in self.failing:
            raise RuntimeError(f"feed {url} exploded")
        return FeedFetchResult(url=url, items=list(self.feeds.get(url, [])), attempts=1)


def not_found_transport() -> httpx.MockTransport:
    """Transport answering every request with 404."""
    return httpx.MockTransport(lambda request: httpx.Response(404))


@pytest.fixture
def make_item():
    """Factory for feed items with sensible defaults."""

    def _make(
        title: str,
        link: Optional[str] = None,
        iso_date: str = "2025-10-14T10:00:00.000Z",
        content: str = "Local officials discussed community safety.",
        enclosure_url: Optional[str] = "https://cdn.example.com/photos/default.jpg",
        **kwargs,
    ) -> RawFeedItem:
        slug = "-".join(title.lower().split())
        return RawFeedItem(
            title=title,
            link=link if link is not None else f"https://news.example.com/{slug}",
            content=content,
            content_snippet=kwargs.pop("content_snippet", content),
            iso_date=iso_date,
            enclosure_url=enclosure_url,
            **kwargs,
        )

    return _make


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings with test feeds and a temporary image directory."""
    return Settings(
        site_url=SITE_URL,
        feeds=FeedsConfig(sources=SOURCES, keywords=KEYWORDS),
        images=ImagesConfig(directory=tmp_path / "images"),
        aggregation=AggregationConfig(),
    )


@pytest.fixture
def stub_reader_class():
    return StubFeedReader


@pytest.fixture
def offline_resolver() -> ImageResolver:
    """Resolver that never downloads and whose page lookups 404."""
    return ImageResolver(downloader=None, transport=not_found_transport())
