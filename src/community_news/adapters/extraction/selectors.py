"""Selector cascades for pulling fields out of article pages.

Each field (title, author, date, description) is read by an ordered list of
independent selectors; the first one that yields a non-empty value wins.
Sites with unusual markup can register extra selectors on a cascade without
touching the extractor.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from bs4 import BeautifulSoup


def normalize_whitespace(text: str) -> str:
    return " ".join(text.split())


class FieldSelector(ABC):
    """One strategy for reading a field from a page."""

    @abstractmethod
    def extract(self, soup: BeautifulSoup) -> str:
        """Return the field value, or an empty string."""
        pass


@dataclass(frozen=True)
class TextSelector(FieldSelector):
    """Text of the first element matching a CSS selector."""

    css: str

    def extract(self, soup: BeautifulSoup) -> str:
        node = soup.select_one(self.css)
        if node is None:
            return ""
        return normalize_whitespace(node.get_text())


@dataclass(frozen=True)
class AttributeSelector(FieldSelector):
    """Attribute of the first element matching a CSS selector."""

    css: str
    attribute: str = "content"

    def extract(self, soup: BeautifulSoup) -> str:
        node = soup.select_one(self.css)
        if node is None:
            return ""
        value = node.get(self.attribute)
        if isinstance(value, list):
            value = " ".join(value)
        return (value or "").strip()


class SelectorCascade:
    """Ordered selectors tried until one yields a value."""

    def __init__(self, selectors: Iterable[FieldSelector] = ()) -> None:
        self._selectors: list[FieldSelector] = list(selectors)

    def register(self, selector: FieldSelector, position: Optional[int] = None) -> None:
        """Add a selector, at the end or at the given position."""
        if position is None:
            self._selectors.append(selector)
        else:
            self._selectors.insert(position, selector)

    def first(self, soup: BeautifulSoup) -> str:
        for selector in self._selectors:
            value = selector.extract(soup)
            if value:
                return value
        return ""

    def __iter__(self) -> Iterator[FieldSelector]:
        return iter(self._selectors)

    def __len__(self) -> int:
        return len(self._selectors)


def title_cascade() -> SelectorCascade:
    return SelectorCascade([
        TextSelector("h1"),
        TextSelector("h1.headline"),
        TextSelector('h1[data-module="ArticleHeader"]'),
        TextSelector(".headline"),
        AttributeSelector('meta[property="og:title"]'),
        TextSelector("title"),
    ])


def author_cascade() -> SelectorCascade:
    return SelectorCascade([
        AttributeSelector('meta[name="author"]'),
        TextSelector(".author"),
        TextSelector('[rel="author"]'),
        TextSelector('span[itemprop="author"]'),
        TextSelector('a[rel="author"]'),
        TextSelector(".byline-author"),
        TextSelector('[data-module="Byline"]'),
    ])


def date_cascade() -> SelectorCascade:
    return SelectorCascade([
        AttributeSelector('meta[property="article:published_time"]'),
        AttributeSelector("time[datetime]", "datetime"),
        AttributeSelector("time", "datetime"),
        AttributeSelector('meta[name="publish-date"]'),
    ])


def description_cascade() -> SelectorCascade:
    return SelectorCascade([
        AttributeSelector('meta[property="og:description"]'),
        AttributeSelector('meta[name="description"]'),
        TextSelector(".article-summary"),
    ])


# Containers tried in order for the article body
BODY_SELECTORS = (
    "article",
    ".article-body",
    ".article-content",
    ".story-body",
    ".post-content",
    '[role="article"]',
    ".entry-content",
    ".content-body",
    ".article-text",
    "main article",
    ".main-content article",
)

# Page furniture stripped before reading the body
NOISE_SELECTOR = "script, style, nav, header, footer, aside, .advertisement, .ad, .sidebar"
