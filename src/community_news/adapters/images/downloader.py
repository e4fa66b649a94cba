"""Download remote images into the local image directory."""

import logging
import time
import uuid
from pathlib import Path
from typing import Iterable, Optional
from urllib.parse import urlparse

import httpx

from community_news.core.entities import DownloadResult
from community_news.core.interfaces import ImageDownloader

logger = logging.getLogger(__name__)


class ImageRejected(Exception):
    """Response is not an acceptable image."""


def is_http_url(url: Optional[str]) -> bool:
    """Check that url parses and uses an http(s) scheme with a host."""
    if not url or not url.startswith("http"):
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def image_subtype(content_type: str) -> str:
    """'image/jpeg; charset=binary' -> 'jpeg'."""
    return content_type.split("/", 1)[1].split(";", 1)[0].strip().lower()


class LocalImageDownloader(ImageDownloader):
    """Save images under uniquely named files in a flat directory."""

    def __init__(
        self,
        directory: Path,
        public_prefix: str = "/images/news",
        timeout: float = 5.0,
        max_bytes: int = 5 * 1024 * 1024,
        allowed_subtypes: Iterable[str] = ("jpeg", "jpg", "png", "gif", "webp"),
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.directory = directory
        self.public_prefix = public_prefix.rstrip("/")
        self.timeout = timeout
        self.max_bytes = max_bytes
        self.allowed_subtypes = frozenset(allowed_subtypes)
        self.transport = transport

    def ensure_directory(self) -> None:
        """Create the image directory if missing."""
        self.directory.mkdir(parents=True, exist_ok=True)

    async def download(self, url: str) -> DownloadResult:
        """Download and store one image. Never raises."""
        if not is_http_url(url):
            return DownloadResult(url=url, reason="invalid url")

        try:
            data, subtype = await self._fetch(url)
            filename = f"{uuid.uuid4()}.{subtype}"
            self.ensure_directory()
            (self.directory / filename).write_bytes(data)
        except ImageRejected as e:
            logger.warning("Rejected image %s: %s", url, e)
            return DownloadResult(url=url, reason=str(e))
        except httpx.TimeoutException:
            return DownloadResult(url=url, reason="timeout")
        except Exception as e:
            logger.warning("Error downloading image from %s: %s", url, e)
            return DownloadResult(url=url, reason=f"{type(e).__name__}: {e}")

        return DownloadResult(url=url, local_path=f"{self.public_prefix}/{filename}")

    async def _fetch(self, url: str) -> tuple[bytes, str]:
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            transport=self.transport,
        ) as client:
            async with client.stream("GET", url) as response:
                if response.status_code != 200:
                    raise ImageRejected(f"HTTP {response.status_code}")

                content_type = response.headers.get("content-type", "")
                if not content_type.startswith("image/"):
                    raise ImageRejected(f"not an image: {content_type or 'no content-type'}")

                declared_length = response.headers.get("content-length")
                if declared_length and declared_length.isdigit() and int(declared_length) > self.max_bytes:
                    raise ImageRejected("image too large")

                chunks: list[bytes] = []
                received = 0
                async for chunk in response.aiter_bytes():
                    received += len(chunk)
                    if received > self.max_bytes:
                        raise ImageRejected("image too large")
                    chunks.append(chunk)

        subtype = image_subtype(content_type)
        if subtype not in self.allowed_subtypes:
            raise ImageRejected(f"unsupported image type: {subtype}")

        return b"".join(chunks), subtype

    async def download_image(self, url: str) -> Optional[str]:
        """Local path of the downloaded image, or None."""
        result = await self.download(url)
        return result.local_path

    def prune(self, max_age_days: float, now: Optional[float] = None) -> int:
        """Remove downloaded images older than max_age_days.

        Returns:
            Number of files removed
        """
        if not self.directory.exists():
            return 0

        cutoff = (now if now is not None else time.time()) - max_age_days * 86400
        removed = 0

        for path in self.directory.iterdir():
            if not path.is_file():
                continue
            try:
                if path.stat().st_mtime < cutoff:
                    path.unlink()
                    removed += 1
            except OSError as e:
                logger.warning("Could not prune %s: %s", path, e)
                continue

        return removed
