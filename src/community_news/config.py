"""Configuration management."""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

import yaml

from community_news.core.entities import FeedSource

DEFAULT_SITE_URL = "https://desistv2.vercel.app"

DEFAULT_FEEDS = (
    FeedSource(url="https://www.cbsnews.com/latest/rss/main", name="CBS News"),
    FeedSource(url="https://feeds.npr.org/1001/rss.xml", name="NPR"),
    FeedSource(url="https://www.nbcnews.com/id/3032091/device/rss/rss.xml", name="NBC News"),
    FeedSource(url="https://www.latimes.com/local/rss2.0.xml", name="LA Times"),
)

DEFAULT_KEYWORDS = (
    "community",
    "protection",
    "harassment",
    "incident",
    "karen",
    "safety",
    "crime",
    "law enforcement",
    "neighborhood",
    "security",
    "threat",
    "violence",
    "abuse",
    "stalking",
    "bullying",
    "discrimination",
    "hate crime",
    "domestic violence",
    "sexual harassment",
    "assault",
)

DESKTOP_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

DEFAULT_KNOWN_SOURCES = MappingProxyType({
    "latimes.com": "LA Times",
    "cbsnews.com": "CBS News",
    "npr.org": "NPR",
    "nbcnews.com": "NBC News",
})


@dataclass(frozen=True)
class FeedsConfig:
    """Feed sources, relevance keywords and retry policy."""
    sources: tuple[FeedSource, ...] = DEFAULT_FEEDS
    keywords: tuple[str, ...] = DEFAULT_KEYWORDS
    max_retries: int = 3
    initial_retry_delay: float = 1.0
    backoff_multiplier: float = 1.5
    timeout: float = 30.0


@dataclass(frozen=True)
class ImagesConfig:
    """Image download settings."""
    directory: Path = Path("public/images/news")
    public_prefix: str = "/images/news"
    timeout: float = 5.0
    max_bytes: int = 5 * 1024 * 1024
    allowed_subtypes: tuple[str, ...] = ("jpeg", "jpg", "png", "gif", "webp")
    max_images: int = 10
    page_fallback_timeout: float = 5.0
    retention_days: Optional[float] = None


@dataclass(frozen=True)
class AggregationConfig:
    """Listing limits."""
    max_articles: int = 50
    default_limit: int = 10
    max_limit: int = 20
    description_length: int = 150


@dataclass(frozen=True)
class ExtractionConfig:
    """Full-content extraction settings."""
    timeout: float = 15.0
    user_agent: str = DESKTOP_USER_AGENT
    known_sources: Mapping[str, str] = field(default_factory=lambda: DEFAULT_KNOWN_SOURCES)
    min_paragraph_length: int = 50
    max_fallback_paragraphs: int = 20
    max_images: int = 10


@dataclass(frozen=True)
class LookupConfig:
    """Article lookup search bounds."""
    metadata_search_pages: int = 5
    max_search_pages: int = 20


@dataclass(frozen=True)
class CacheConfig:
    """Snapshot cache. A TTL of 0 disables caching."""
    ttl_seconds: float = 0


@dataclass(frozen=True)
class Settings:
    """Application settings."""

    site_url: str = DEFAULT_SITE_URL
    host: str = "127.0.0.1"
    port: int = 8000

    # Config sections
    feeds: FeedsConfig = field(default_factory=FeedsConfig)
    images: ImagesConfig = field(default_factory=ImagesConfig)
    aggregation: AggregationConfig = field(default_factory=AggregationConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    lookup: LookupConfig = field(default_factory=LookupConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)

    def article_url(self, article_id: str) -> str:
        """Internal detail-page URL for an article id."""
        return f"{self.site_url.rstrip('/')}/blog/{article_id}"


def load_config(config_path: Path = Path("config.yaml")) -> dict:
    """Load configuration from YAML file."""
    if not config_path.exists():
        return {}

    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _feeds_section(values: dict[str, Any]) -> FeedsConfig:
    values = dict(values)
    if "sources" in values:
        values["sources"] = tuple(
            FeedSource(url=source["url"], name=source["name"])
            for source in values["sources"]
        )
    if "keywords" in values:
        values["keywords"] = tuple(values["keywords"])
    return replace(FeedsConfig(), **values)


def _images_section(values: dict[str, Any]) -> ImagesConfig:
    values = dict(values)
    if "directory" in values:
        values["directory"] = Path(values["directory"])
    if "allowed_subtypes" in values:
        values["allowed_subtypes"] = tuple(values["allowed_subtypes"])
    return replace(ImagesConfig(), **values)


def _extraction_section(values: dict[str, Any]) -> ExtractionConfig:
    values = dict(values)
    if "known_sources" in values:
        values["known_sources"] = MappingProxyType(dict(values["known_sources"]))
    return replace(ExtractionConfig(), **values)


def resolve_site_url(configured: Optional[str] = None) -> str:
    """Base URL for internal links: SITE_URL, then VERCEL_URL, then config."""
    site_url = os.getenv("SITE_URL")
    if site_url:
        return site_url

    vercel_url = os.getenv("VERCEL_URL")
    if vercel_url:
        return f"https://{vercel_url}"

    return configured or DEFAULT_SITE_URL


def get_settings(config_path: Path = Path("config.yaml")) -> Settings:
    """Get application settings from YAML config and environment."""
    # Load YAML config
    config = load_config(config_path)

    sections: dict[str, Any] = {}

    # Apply YAML config
    if "feeds" in config:
        sections["feeds"] = _feeds_section(config["feeds"])

    if "images" in config:
        sections["images"] = _images_section(config["images"])

    if "aggregation" in config:
        sections["aggregation"] = replace(AggregationConfig(), **config["aggregation"])

    if "extraction" in config:
        sections["extraction"] = _extraction_section(config["extraction"])

    if "lookup" in config:
        sections["lookup"] = replace(LookupConfig(), **config["lookup"])

    if "cache" in config:
        sections["cache"] = replace(CacheConfig(), **config["cache"])

    server = config.get("server", {})
    if "host" in server:
        sections["host"] = server["host"]
    if "port" in server:
        sections["port"] = int(server["port"])

    # Environment wins over YAML for deployment-specific values
    sections["site_url"] = resolve_site_url(config.get("site_url"))

    return Settings(**sections)
