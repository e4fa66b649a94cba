"""Feed adapters."""

from community_news.adapters.feeds.filters import is_relevant, matches_keywords
from community_news.adapters.feeds.rss_reader import RSSFeedReader, fetch_feed, parse_feed

__all__ = ["RSSFeedReader", "fetch_feed", "parse_feed", "is_relevant", "matches_keywords"]
