"""Stable article identifiers."""

import hashlib
import re
import uuid
from typing import Optional

MAX_SLUG_LENGTH = 60
HASH_LENGTH = 8


def slugify(title: str) -> str:
    """Make a URL-friendly slug from a title."""
    slug = title.lower().strip()
    slug = re.sub(r"[^a-z0-9\s_-]", "", slug)
    slug = re.sub(r"[\s_-]+", "-", slug)
    return slug.strip("-")


def url_hash(url: str) -> str:
    """First 8 hex chars of the URL's SHA-256."""
    return hashlib.sha256(url.encode("utf-8")).hexdigest()[:HASH_LENGTH]


def generate_article_id(title: Optional[str], url: Optional[str]) -> str:
    """
    Derive an article id from its title and external URL.

    The same (title, url) pair always yields the same id, which is what
    lets the detail endpoint find an article again by re-aggregating.

    Args:
        title: Article headline
        url: Canonical external URL

    Returns:
        "<slug>-<hash>", "article-<hash>" when there is no usable title,
        or "article-<random>" when there is no URL either
    """
    if not url:
        return f"article-{uuid.uuid4().hex[:HASH_LENGTH]}"

    digest = url_hash(url)
    slug = slugify(title or "")[:MAX_SLUG_LENGTH].rstrip("-")
    if not slug:
        return f"article-{digest}"

    return f"{slug}-{digest}"
