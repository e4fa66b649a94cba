"""Tests for selector cascades."""

from bs4 import BeautifulSoup

from community_news.adapters.extraction import AttributeSelector, SelectorCascade, TextSelector
from community_news.adapters.extraction.selectors import author_cascade, title_cascade


def soup_of(html):
    return BeautifulSoup(html, "html.parser")


def test_first_non_empty_value_wins():
    """Test cascade skips selectors that find nothing."""
    cascade = SelectorCascade([
        TextSelector(".missing"),
        TextSelector(".empty"),
        TextSelector(".byline"),
    ])
    soup = soup_of('<span class="empty">  </span><span class="byline">Jo Smith</span>')

    assert cascade.first(soup) == "Jo Smith"


def test_attribute_selector():
    """Test attribute values are read and stripped."""
    soup = soup_of('<meta name="author" content="  Staff Writer "><time datetime="2025-10-01">x</time>')

    assert AttributeSelector('meta[name="author"]').extract(soup) == "Staff Writer"
    assert AttributeSelector("time", "datetime").extract(soup) == "2025-10-01"
    assert AttributeSelector('meta[name="missing"]').extract(soup) == ""


def test_register_appends_or_inserts():
    """Test selectors can be added at the end or at a position."""
    cascade = SelectorCascade([TextSelector("h1")])
    cascade.register(TextSelector("h2"))
    cascade.register(TextSelector(".kicker"), position=0)

    assert [selector.css for selector in cascade] == [".kicker", "h1", "h2"]
    assert len(cascade) == 3


def test_default_cascades():
    """Test default title and author order."""
    assert [selector.css for selector in title_cascade()][0] == "h1"
    assert [selector.css for selector in title_cascade()][-1] == "title"
    assert len(author_cascade()) == 7
    assert title_cascade().first(soup_of("<p>nothing</p>")) == ""
