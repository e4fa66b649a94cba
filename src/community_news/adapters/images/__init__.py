"""Image adapters."""

from community_news.adapters.images.downloader import LocalImageDownloader
from community_news.adapters.images.resolver import ImageResolver

__all__ = ["ImageResolver", "LocalImageDownloader"]
