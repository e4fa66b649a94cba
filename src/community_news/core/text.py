"""Text helpers."""

from typing import Optional

from bs4 import BeautifulSoup


def truncate_text(text: Optional[str], max_length: int) -> str:
    """Cut text to max_length characters, appending "..." when shortened."""
    if not text:
        return ""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def html_to_text(html: Optional[str]) -> str:
    """Plain text of an HTML fragment, whitespace collapsed."""
    if not html:
        return ""
    text = BeautifulSoup(html, "html.parser").get_text(" ")
    return " ".join(text.split())
