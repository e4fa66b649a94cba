"""RSS/Atom feed reader with retry and backoff."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Optional

import feedparser
import httpx

from community_news.core.entities import FeedFetchResult, RawFeedItem
from community_news.core.interfaces import FeedReader
from community_news.core.text import html_to_text

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({502, 503, 504})

FEED_USER_AGENT = "Mozilla/5.0 (compatible; community-news/0.1; +rss)"


class FeedParseError(Exception):
    """Feed document could not be parsed at all."""


def is_retryable_error(error: BaseException) -> bool:
    """
    Check if a feed fetch error is worth retrying.

    Retryable: HTTP 502/503/504, connection resets, and timeouts.
    Everything else (4xx, parse errors, DNS failures) fails fast.
    """
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code in RETRYABLE_STATUS_CODES

    if isinstance(error, (httpx.TimeoutException, ConnectionResetError, TimeoutError)):
        return True

    if isinstance(error, httpx.TransportError):
        message = str(error).lower()
        return "reset" in message or "timed out" in message or "timeout" in message

    return False


def _iso_date(entry: Any) -> str:
    """ISO 8601 (UTC, millisecond precision) from feedparser's parsed date."""
    for field_name in ("published_parsed", "updated_parsed"):
        time_struct = entry.get(field_name)
        if time_struct:
            try:
                dt = datetime(*time_struct[:6], tzinfo=timezone.utc)
            except (TypeError, ValueError):
                continue
            return dt.strftime("%Y-%m-%dT%H:%M:%S.000Z")
    return ""


def _media_urls(entry: Any, key: str) -> list[str]:
    return [media["url"] for media in entry.get(key, []) if media.get("url")]


def entry_to_item(entry: Any) -> RawFeedItem:
    """Normalize one feedparser entry."""
    encoded = ""
    if entry.get("content"):
        encoded = entry["content"][0].get("value", "")

    description = entry.get("summary", "") or entry.get("description", "")
    content = encoded or description

    enclosure_url = None
    for enclosure in entry.get("enclosures", []):
        enclosure_url = enclosure.get("href") or enclosure.get("url")
        if enclosure_url:
            break

    # itunes:image lands in entry.image
    image = entry.get("image")
    itunes_image = image.get("href") if isinstance(image, dict) else None

    return RawFeedItem(
        title=(entry.get("title") or "").strip(),
        link=(entry.get("link") or "").strip(),
        content=content,
        content_snippet=html_to_text(content),
        description=description,
        pub_date=entry.get("published") or entry.get("updated") or "",
        iso_date=_iso_date(entry),
        enclosure_url=enclosure_url,
        media_content=_media_urls(entry, "media_content"),
        media_thumbnail=_media_urls(entry, "media_thumbnail"),
        itunes_image=itunes_image,
        author=entry.get("author", ""),
        categories=[tag["term"] for tag in entry.get("tags", []) if tag.get("term")],
    )


def parse_feed(document: bytes | str) -> list[RawFeedItem]:
    """Parse an RSS/Atom document into raw items."""
    parsed = feedparser.parse(document)

    if parsed.bozo and not parsed.entries:
        raise FeedParseError(str(parsed.get("bozo_exception", "unparseable feed")))

    items: list[RawFeedItem] = []
    for entry in parsed.entries:
        try:
            items.append(entry_to_item(entry))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            # Skip malformed entries
            logger.debug("Skipping malformed feed entry: %s", e)
            continue

    return items


class RSSFeedReader(FeedReader):
    """Fetch feeds over HTTP, retrying transient failures with backoff."""

    def __init__(
        self,
        max_retries: int = 3,
        initial_delay: float = 1.0,
        backoff_multiplier: float = 1.5,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.max_retries = max(1, max_retries)
        self.initial_delay = initial_delay
        self.backoff_multiplier = backoff_multiplier
        self.timeout = timeout
        self.transport = transport
        self._sleep = sleep

    async def fetch(self, url: str) -> FeedFetchResult:
        """Fetch and parse a feed, returning an empty result once retries run out."""
        delay = self.initial_delay
        last_error: Optional[BaseException] = None
        attempt = 0

        logger.info("Fetching feed %s", url)

        for attempt in range(1, self.max_retries + 1):
            try:
                items = await self._fetch_once(url)
                logger.info("Fetched %d items from %s", len(items), url)
                return FeedFetchResult(url=url, items=items, attempts=attempt)
            except Exception as e:
                last_error = e
                logger.warning(
                    "Error fetching feed %s (attempt %d/%d): %s",
                    url, attempt, self.max_retries, e,
                )

                if attempt == self.max_retries or not is_retryable_error(e):
                    break

                logger.info("Retrying %s in %.1fs", url, delay)
                await self._sleep(delay)
                delay *= self.backoff_multiplier

        logger.error("Giving up on feed %s after %d attempt(s)", url, attempt)
        return FeedFetchResult(
            url=url,
            items=[],
            attempts=attempt,
            error=f"{type(last_error).__name__}: {last_error}",
        )

    async def _fetch_once(self, url: str) -> list[RawFeedItem]:
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers={"User-Agent": FEED_USER_AGENT},
            transport=self.transport,
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
            return parse_feed(response.content)


async def fetch_feed(
    url: str,
    max_retries: int = 3,
    initial_delay: float = 1.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> list[RawFeedItem]:
    """Fetch one feed's items, or an empty list if it stays unreachable."""
    reader = RSSFeedReader(
        max_retries=max_retries,
        initial_delay=initial_delay,
        transport=transport,
    )
    result = await reader.fetch(url)
    return result.items
