"""Keyword relevance filtering for feed items."""

from typing import Iterable, Optional

from community_news.core.entities import RawFeedItem


def matches_keywords(title: str, content: str, keywords: Iterable[str]) -> bool:
    """
    Check whether any keyword occurs in title or content.

    Matching is plain case-insensitive substring containment: no word
    boundaries and no stemming, so "ad" would match "advocate".

    Args:
        title: Title of the item
        content: Summary and/or body of the item
        keywords: Keywords to look for

    Returns:
        True if any keyword is found
    """
    text = f"{title} {content}".lower()
    return any(keyword.lower() in text for keyword in keywords)


def is_relevant(item: Optional[RawFeedItem], keywords: Iterable[str]) -> bool:
    """Check if a feed item matches the configured keyword set."""
    if item is None:
        return False

    return matches_keywords(
        item.title or "",
        f"{item.content_snippet or ''} {item.content or ''}",
        keywords,
    )
