"""Full-content extraction from external article pages."""

import logging
import re
from typing import Mapping, Optional
from urllib.parse import urlparse

import httpx
from bs4 import BeautifulSoup, Tag

from community_news.adapters.extraction.selectors import (
    BODY_SELECTORS,
    NOISE_SELECTOR,
    SelectorCascade,
    author_cascade,
    date_cascade,
    description_cascade,
    title_cascade,
)
from community_news.adapters.images.urls import dedupe_images, resolve_image_url
from community_news.config import DESKTOP_USER_AGENT
from community_news.core.entities import EXTRACTION_EMPTY_CONTENT, ExtractedContent
from community_news.core.interfaces import ContentExtractor

logger = logging.getLogger(__name__)

TITLE_SUFFIX_PATTERNS = (
    re.compile(r"\s*-\s*LA Times.*$", re.IGNORECASE),
    re.compile(r"\s*-\s*Los Angeles Times.*$", re.IGNORECASE),
    re.compile(r"\s*\|\s*LA Times.*$", re.IGNORECASE),
)

# Audio-narration disclaimers some publishers inline into the body
BOILERPLATE_PATTERNS = (
    re.compile(
        r"This is read by an automated voice\.?\s*Please report any issues or inconsistencies here\.?",
        re.IGNORECASE,
    ),
    re.compile(
        r"This article was read by an automated voice\.?\s*Please report any issues or inconsistencies here\.?",
        re.IGNORECASE,
    ),
    re.compile(r"Read by an automated voice\.?\s*Please report any issues\.?", re.IGNORECASE),
    re.compile(r"This is read by an automated voice", re.IGNORECASE),
    re.compile(r"Please report any issues or inconsistencies here\.?", re.IGNORECASE),
)

IMAGE_SRC_ATTRIBUTES = ("src", "data-src", "data-lazy-src", "data-original")
EXCLUDED_URL_MARKERS = ("icon", "logo", "avatar", "ad", "advertisement")
EXCLUDED_ALT_MARKERS = ("ad", "advertisement")
MIN_IMAGE_WIDTH = 300
MIN_IMAGE_HEIGHT = 200


def clean_title(title: str) -> str:
    """Strip known site-name suffixes from a headline."""
    for pattern in TITLE_SUFFIX_PATTERNS:
        title = pattern.sub("", title)
    return title.strip()


def remove_boilerplate(content: str) -> str:
    """Remove automated-voice disclaimers from body text."""
    for pattern in BOILERPLATE_PATTERNS:
        content = pattern.sub("", content)
    return content.strip()


def source_from_url(url: str, known_sources: Mapping[str, str]) -> str:
    """Display name of a publisher from its hostname."""
    hostname = urlparse(url).hostname or ""
    for domain, name in known_sources.items():
        if domain in hostname:
            return name

    label = hostname.replace("www.", "", 1).split(".")[0]
    if not label:
        return "Unknown"
    return label[0].upper() + label[1:]


def _leading_int(value: Optional[str]) -> int:
    match = re.match(r"\s*(\d+)", value or "")
    return int(match.group(1)) if match else 0


def is_article_image(image_url: str, img: Tag) -> bool:
    """
    Heuristic filter for content images.

    Drops URLs or alt texts that look like icons, logos, avatars or ads, and
    images whose declared size is small. Substring matching is deliberately
    loose: any URL containing "ad" is dropped.
    """
    if any(marker in image_url for marker in EXCLUDED_URL_MARKERS):
        return False

    alt = (img.get("alt") or "").lower()
    if any(marker in alt for marker in EXCLUDED_ALT_MARKERS):
        return False

    width = _leading_int(img.get("width"))
    height = _leading_int(img.get("height"))
    return width > MIN_IMAGE_WIDTH or height > MIN_IMAGE_HEIGHT or (not width and not height)


class ArticleExtractor(ContentExtractor):
    """Scrape title, byline, date, description, body and images from a page."""

    def __init__(
        self,
        timeout: float = 15.0,
        user_agent: str = DESKTOP_USER_AGENT,
        known_sources: Optional[Mapping[str, str]] = None,
        min_paragraph_length: int = 50,
        max_fallback_paragraphs: int = 20,
        max_images: int = 10,
        cascades: Optional[Mapping[str, SelectorCascade]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self.known_sources = dict(known_sources or {})
        self.min_paragraph_length = min_paragraph_length
        self.max_fallback_paragraphs = max_fallback_paragraphs
        self.max_images = max_images
        self.transport = transport

        self.cascades: dict[str, SelectorCascade] = {
            "title": title_cascade(),
            "author": author_cascade(),
            "date": date_cascade(),
            "description": description_cascade(),
        }
        if cascades:
            self.cascades.update(cascades)

    async def extract(self, url: str) -> ExtractedContent:
        """Fetch and parse an article page. Never raises."""
        try:
            html = await self._fetch(url)
            extracted = self.parse(html, url)
        except Exception as e:
            logger.error("Error fetching full article content from %s: %s", url, e)
            return ExtractedContent.unavailable()

        logger.info(
            "Extracted %s: title=%r author=%r source=%s content_length=%d images=%d",
            url,
            extracted.title[:60],
            extracted.author[:40],
            extracted.source,
            len(extracted.content),
            len(extracted.images),
        )
        return extracted

    async def _fetch(self, url: str) -> str:
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers={
                "User-Agent": self.user_agent,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                "Accept-Language": "en-US,en;q=0.5",
            },
            transport=self.transport,
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
            return response.text

    def parse(self, html: str, url: str) -> ExtractedContent:
        """Extract fields from already-fetched HTML."""
        soup = BeautifulSoup(html, "html.parser")

        # Metadata first: header/footer removal below would drop bylines
        title = clean_title(self.cascades["title"].first(soup))
        author = self.cascades["author"].first(soup)
        date = self.cascades["date"].first(soup)
        description = self.cascades["description"].first(soup)
        source = source_from_url(url, self.known_sources)

        for node in soup.select(NOISE_SELECTOR):
            node.extract()

        content = remove_boilerplate(self._extract_body(soup))
        images = self._extract_images(soup, url)

        return ExtractedContent(
            content=content or EXTRACTION_EMPTY_CONTENT,
            title=title,
            author=author,
            source=source,
            date=date,
            description=description,
            images=images,
        )

    def _long_paragraphs(self, container: Tag) -> list[str]:
        paragraphs = []
        for p in container.find_all("p"):
            text = p.get_text().strip()
            if len(text) > self.min_paragraph_length:
                paragraphs.append(text)
        return paragraphs

    def _extract_body(self, soup: BeautifulSoup) -> str:
        for selector in BODY_SELECTORS:
            container = soup.select_one(selector)
            if container is None:
                continue

            paragraphs = self._long_paragraphs(container)
            if paragraphs:
                return "\n\n".join(paragraphs)

        # No known container: take long paragraphs from anywhere in the body
        body = soup.body or soup
        paragraphs = self._long_paragraphs(body)[:self.max_fallback_paragraphs]
        return "\n\n".join(paragraphs)

    def _collect_images(self, scope: Tag, url: str) -> list[str]:
        images = []
        for img in scope.find_all("img"):
            src = next((img.get(attr) for attr in IMAGE_SRC_ATTRIBUTES if img.get(attr)), None)
            image_url = resolve_image_url(src, url)
            if image_url and is_article_image(image_url, img):
                images.append(image_url)
        return images

    def _extract_images(self, soup: BeautifulSoup, url: str) -> list[str]:
        images: list[str] = []

        article = soup.find("article")
        if article is not None:
            images = self._collect_images(article, url)

        if not images:
            images = self._collect_images(soup, url)

        # Page-level share images usually show the lead photo
        og_meta = soup.find("meta", attrs={"property": "og:image"})
        og_image = resolve_image_url(og_meta.get("content") if og_meta else None, url)
        if og_image and og_image not in images:
            images.insert(0, og_image)

        meta = soup.find("meta", attrs={"name": "image"}) or soup.find("meta", attrs={"itemprop": "image"})
        meta_image = resolve_image_url(meta.get("content") if meta else None, url)
        if meta_image and meta_image not in images:
            images.insert(0, meta_image)

        return dedupe_images(images, self.max_images)
