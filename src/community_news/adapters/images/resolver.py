"""Locate and download images for feed items."""

import logging
from typing import Optional

import httpx
from bs4 import BeautifulSoup

from community_news.adapters.images.urls import dedupe_images, resolve_image_url
from community_news.config import DESKTOP_USER_AGENT
from community_news.core.entities import RawFeedItem, ResolvedImages
from community_news.core.interfaces import ImageDownloader

logger = logging.getLogger(__name__)

LAZY_SRC_ATTRIBUTES = ("src", "data-src", "data-lazy-src")


def primary_candidate(item: RawFeedItem) -> Optional[str]:
    """First image the feed itself declares: enclosure, media:content, media:thumbnail, itunes:image."""
    if item.enclosure_url:
        return item.enclosure_url
    if item.media_content:
        return item.media_content[0]
    if item.media_thumbnail:
        return item.media_thumbnail[0]
    if item.itunes_image:
        return item.itunes_image
    return None


def inline_images(html: str, article_url: Optional[str]) -> list[str]:
    """Image URLs referenced by <img> tags in an HTML fragment."""
    if not html:
        return []

    images: list[str] = []
    try:
        soup = BeautifulSoup(html, "html.parser")
    except Exception as e:
        logger.debug("Could not parse item HTML for images: %s", e)
        return []

    for img in soup.find_all("img"):
        src = next((img.get(attr) for attr in LAZY_SRC_ATTRIBUTES if img.get(attr)), None)
        resolved = resolve_image_url(src, article_url)
        if resolved:
            images.append(resolved)

    return images


class ImageResolver:
    """Find a primary image and an image list for a feed item."""

    def __init__(
        self,
        downloader: Optional[ImageDownloader] = None,
        max_images: int = 10,
        page_timeout: float = 5.0,
        user_agent: str = DESKTOP_USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.downloader = downloader
        self.max_images = max_images
        self.page_timeout = page_timeout
        self.user_agent = user_agent
        self.transport = transport

    async def resolve(self, item: RawFeedItem, article_url: Optional[str]) -> ResolvedImages:
        """Resolve images for one item. Network failures only mean fewer images."""
        primary = primary_candidate(item)

        local_path = None
        if primary and self.downloader is not None:
            result = await self.downloader.download(primary)
            local_path = result.local_path

        images = inline_images(item.content or item.content_snippet or item.description, article_url)

        if primary:
            images.insert(0, primary)
            if local_path:
                images.insert(0, local_path)

        # Last resort: the article page's Open Graph image
        if not primary and article_url and not images:
            og_image = await self.fetch_og_image(article_url)
            if og_image:
                primary = og_image
                images.append(og_image)

        return ResolvedImages(
            primary=primary,
            images=dedupe_images(images, self.max_images),
            local_path=local_path,
        )

    async def fetch_og_image(self, article_url: str) -> Optional[str]:
        """og:image of the article page, or None."""
        try:
            async with httpx.AsyncClient(
                timeout=self.page_timeout,
                follow_redirects=True,
                headers={"User-Agent": self.user_agent},
                transport=self.transport,
            ) as client:
                response = await client.get(article_url)
                response.raise_for_status()
            soup = BeautifulSoup(response.text, "html.parser")
        except Exception as e:
            logger.info("Could not fetch image from article page %s: %s", article_url, e)
            return None

        meta = soup.find("meta", attrs={"property": "og:image"})
        if meta is None:
            return None

        og_image = resolve_image_url(meta.get("content"), article_url)
        if og_image:
            logger.info("Found OG image for %s: %s", article_url, og_image)
        return og_image
