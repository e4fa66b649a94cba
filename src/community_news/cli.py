"""CLI entry point for community news."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import typer
import uvicorn

from community_news.adapters.images import LocalImageDownloader
from community_news.api import create_app
from community_news.config import get_settings
from community_news.core import NewsError
from community_news.use_cases import ArticleLookupService, NewsAggregator

app = typer.Typer(help="Community-safety news aggregation service.")

CONFIG_OPTION = typer.Option(Path("config.yaml"), "--config", help="Path to config.yaml")


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address"),
    port: Optional[int] = typer.Option(None, help="Bind port"),
    config: Path = CONFIG_OPTION,
) -> None:
    """Run the news API."""
    _setup_logging(verbose=False)
    settings = get_settings(config)

    uvicorn.run(
        create_app(settings),
        host=host or settings.host,
        port=port or settings.port,
    )


@app.command()
def fetch(
    page: int = typer.Option(1, help="Page number"),
    limit: int = typer.Option(10, help="Articles per page"),
    config: Path = CONFIG_OPTION,
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Print one page of relevant articles."""
    _setup_logging(verbose)
    settings = get_settings(config)
    aggregator = NewsAggregator.from_settings(settings)

    try:
        listing = asyncio.run(aggregator.get_articles(page, limit))
    except NewsError as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1)

    pagination = listing.pagination
    print("\n" + "=" * 70)
    print(
        f"Page {pagination.current_page}/{pagination.total_pages} "
        f"({pagination.total_articles} articles)"
    )
    print("=" * 70)

    for article in listing.articles:
        print(f"\n• {article.title}")
        print(f"  {article.source} | {article.date}")
        print(f"  {article.original_url}")
        if article.image_url:
            print(f"  🖼  {article.image_url}")

    if pagination.has_more:
        print(f"\nMore: --page {pagination.current_page + 1}")


@app.command()
def article(
    article_id: str = typer.Argument(..., help="Article id"),
    url: Optional[str] = typer.Option(None, help="Original article URL"),
    config: Path = CONFIG_OPTION,
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Print one article with its full content as JSON."""
    _setup_logging(verbose)
    settings = get_settings(config)
    aggregator = NewsAggregator.from_settings(settings)
    lookup_service = ArticleLookupService.from_settings(settings, aggregator)

    try:
        found = asyncio.run(lookup_service.lookup(article_id, known_url=url))
    except NewsError as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1)

    print(json.dumps(found.to_dict(), indent=2, ensure_ascii=False))


@app.command("prune-images")
def prune_images(
    days: Optional[float] = typer.Option(None, help="Maximum age in days"),
    config: Path = CONFIG_OPTION,
) -> None:
    """Delete downloaded images older than the retention period."""
    _setup_logging(verbose=False)
    settings = get_settings(config)

    max_age = days if days is not None else settings.images.retention_days
    if max_age is None:
        print("No retention period set (use --days or images.retention_days)")
        raise typer.Exit(code=1)

    downloader = LocalImageDownloader(
        directory=settings.images.directory,
        public_prefix=settings.images.public_prefix,
    )
    removed = downloader.prune(max_age)
    print(f"Removed {removed} images older than {max_age:g} days from {settings.images.directory}")


if __name__ == "__main__":
    app()
