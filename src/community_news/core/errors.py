"""Domain errors surfaced to the HTTP layer."""


class NewsError(Exception):
    """Base class for errors the service reports to clients."""


class InvalidPaginationError(NewsError, ValueError):
    """Page or limit outside the accepted range."""


class ArticleNotFoundError(NewsError, LookupError):
    """No article matches the requested id."""

    def __init__(
        self,
        message: str = (
            "Article not found. Please try refreshing the news page "
            "and clicking the article again."
        ),
    ) -> None:
        super().__init__(message)
