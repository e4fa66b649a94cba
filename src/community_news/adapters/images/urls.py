"""Image URL helpers shared by the resolver and the extractor."""

from typing import Iterable, Optional
from urllib.parse import urljoin, urlparse


def resolve_image_url(src: Optional[str], base_url: Optional[str]) -> Optional[str]:
    """
    Absolute URL for an image reference.

    Args:
        src: Raw src/data-src/meta content value
        base_url: URL of the page the reference appeared on

    Returns:
        Absolute http(s) URL, or None for data: URIs, missing or
        unparseable references
    """
    if not src:
        return None

    src = src.strip()
    if not src or src.startswith("data:"):
        return None

    if src.startswith(("http://", "https://")):
        return src

    if not base_url:
        return None

    try:
        resolved = urljoin(base_url, src)
        parsed = urlparse(resolved)
    except ValueError:
        return None

    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    return resolved


def dedupe_images(images: Iterable[str], limit: int = 10) -> list[str]:
    """Drop exact duplicates keeping first occurrences, then cap at limit."""
    return list(dict.fromkeys(images))[:limit]
