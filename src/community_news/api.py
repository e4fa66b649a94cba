"""FastAPI app serving the news listing and article detail endpoints."""

import logging
from typing import Optional

from fastapi import FastAPI, Query
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from community_news.config import Settings, get_settings
from community_news.core import ArticleNotFoundError, InvalidPaginationError
from community_news.use_cases import ArticleLookupService, NewsAggregator

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _parse_int(value: Optional[str], default: int, message: str) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise InvalidPaginationError(message) from exc


def create_app(
    settings: Optional[Settings] = None,
    aggregator: Optional[NewsAggregator] = None,
    lookup_service: Optional[ArticleLookupService] = None,
) -> FastAPI:
    """
    Build the API application.

    Args:
        settings: Application settings, loaded from config.yaml if omitted
        aggregator: Listing service; built from settings if omitted
        lookup_service: Detail service; built from settings if omitted
    """
    settings = settings or get_settings()
    aggregator = aggregator or NewsAggregator.from_settings(settings)
    lookup_service = lookup_service or ArticleLookupService.from_settings(settings, aggregator)

    max_limit = settings.aggregation.max_limit
    limit_message = f"Invalid limit. Must be between 1 and {max_limit}"

    app = FastAPI(title="Community News", version="1.0.0")

    settings.images.directory.mkdir(parents=True, exist_ok=True)
    app.mount(
        settings.images.public_prefix,
        StaticFiles(directory=str(settings.images.directory)),
        name="images",
    )

    @app.get("/api/news")
    async def list_news(
        page: Optional[str] = Query(default=None),
        limit: Optional[str] = Query(default=None),
    ):
        """One page of relevant articles, newest first."""
        try:
            page_number = _parse_int(page, 1, "Invalid page number")
            page_size = _parse_int(limit, settings.aggregation.default_limit, limit_message)
            listing = await aggregator.get_articles(page_number, page_size)
        except InvalidPaginationError as exc:
            return _error(400, str(exc))
        except Exception:
            logger.exception("Error in news API")
            return _error(500, "Failed to fetch news")

        return listing.to_dict()

    @app.get("/api/news/{article_id}")
    async def get_article(article_id: str, url: Optional[str] = Query(default=None)):
        """Full article content for one id."""
        try:
            article = await lookup_service.lookup(article_id, known_url=url or None)
        except ArticleNotFoundError as exc:
            return _error(404, str(exc))
        except Exception:
            logger.exception("Error in article API")
            return _error(500, "Failed to fetch article")

        return article.to_dict()

    return app
