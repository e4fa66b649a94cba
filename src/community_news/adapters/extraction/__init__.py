"""Article page extraction adapters."""

from community_news.adapters.extraction.article_extractor import ArticleExtractor
from community_news.adapters.extraction.selectors import (
    AttributeSelector,
    FieldSelector,
    SelectorCascade,
    TextSelector,
)

__all__ = [
    "ArticleExtractor",
    "AttributeSelector",
    "FieldSelector",
    "SelectorCascade",
    "TextSelector",
]
