"""Tests for core entities."""

import pytest

from community_news.core import (
    Article,
    ArticlePage,
    DownloadResult,
    ExtractedContent,
    FeedFetchResult,
    FeedSource,
    Pagination,
)
from community_news.core.entities import EXTRACTION_UNAVAILABLE_CONTENT


def test_feed_source_validation():
    """Test feed source requires URL and name."""
    with pytest.raises(ValueError, match="URL cannot be empty"):
        FeedSource(url="", name="NPR")

    with pytest.raises(ValueError, match="name cannot be empty"):
        FeedSource(url="https://feeds.npr.org/1001/rss.xml", name="")


def test_article_to_dict_uses_camel_case():
    """Test article JSON keys."""
    article = Article(
        id="a-1",
        title="Title",
        description="Desc",
        content="Body",
        url="https://site.test/blog/a-1",
        original_url="https://news.example.com/a",
        image_url=None,
        images=["https://cdn.example.com/1.jpg"],
        source="NPR",
        date="2025-10-14T10:00:00.000Z",
        author="NPR",
        categories=["Local"],
    )

    data = article.to_dict()

    assert set(data) == {
        "id", "title", "description", "content", "url", "originalUrl",
        "imageUrl", "images", "source", "date", "author", "categories",
    }
    assert data["originalUrl"] == "https://news.example.com/a"
    assert data["imageUrl"] is None


def test_article_page_to_dict():
    """Test listing JSON shape."""
    page = ArticlePage(
        articles=[],
        pagination=Pagination(
            current_page=2,
            total_pages=3,
            total_articles=25,
            articles_per_page=10,
            has_more=True,
        ),
    )

    assert page.to_dict() == {
        "articles": [],
        "pagination": {
            "currentPage": 2,
            "totalPages": 3,
            "totalArticles": 25,
            "articlesPerPage": 10,
            "hasMore": True,
        },
    }


def test_result_ok_flags():
    """Test ok properties on fetch and download results."""
    assert FeedFetchResult(url="u", items=[], attempts=1).ok
    assert not FeedFetchResult(url="u", items=[], attempts=3, error="HTTPStatusError").ok
    assert DownloadResult(url="u", local_path="/images/news/x.jpg").ok
    assert not DownloadResult(url="u", reason="timeout").ok


def test_extracted_content_unavailable():
    """Test extraction fallback value."""
    fallback = ExtractedContent.unavailable()

    assert fallback.content == EXTRACTION_UNAVAILABLE_CONTENT
    assert fallback.source == "Unknown"
    assert fallback.title == ""
    assert fallback.images == []
