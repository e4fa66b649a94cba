"""Tests for full-content extraction."""

import httpx
import pytest
from bs4 import BeautifulSoup

from community_news.adapters.extraction import ArticleExtractor, TextSelector
from community_news.adapters.extraction.article_extractor import (
    clean_title,
    is_article_image,
    remove_boilerplate,
    source_from_url,
)
from community_news.core.entities import EXTRACTION_EMPTY_CONTENT, EXTRACTION_UNAVAILABLE_CONTENT

ARTICLE_URL = "https://www.latimes.com/california/story/patrol"

KNOWN_SOURCES = {"latimes.com": "LA Times", "npr.org": "NPR"}

ARTICLE_HTML = """
<html>
<head>
  <title>Ignored page title</title>
  <meta property="og:title" content="Open Graph title">
  <meta name="author" content="Maria Lopez">
  <meta property="article:published_time" content="2025-10-14T09:00:00Z">
  <meta property="og:description" content="A short summary of the patrol story.">
  <meta property="og:image" content="https://cdn.example.com/photos/cover.jpg">
</head>
<body>
  <header><nav>Sections Menu</nav></header>
  <article>
    <h1>Community patrol expands - Los Angeles Times</h1>
    <p>This is read by an automated voice. Please report any issues or inconsistencies here.</p>
    <p>The neighborhood patrol program expanded to three new districts this week, officials said.</p>
    <p>Short line.</p>
    <p>Residents have reported fewer incidents since volunteers began walking the area each evening.</p>
    <img src="/photos/patrol.jpg" alt="Volunteers on patrol">
    <img src="https://cdn.example.com/site-logo.png">
    <img src="https://cdn.example.com/photos/tiny.jpg" width="50" height="50">
    <script>var tracking = "This script text is long enough to look like a paragraph";</script>
  </article>
  <aside><p>Sidebar text that would be long enough to count as a paragraph if kept.</p></aside>
  <footer>Copyright</footer>
</body>
</html>
"""


@pytest.fixture
def extractor():
    """Create extractor with known publisher names."""
    return ArticleExtractor(known_sources=KNOWN_SOURCES)


def test_parse_article(extractor):
    """Test fields are extracted from a typical article page."""
    extracted = extractor.parse(ARTICLE_HTML, ARTICLE_URL)

    assert extracted.title == "Community patrol expands"
    assert extracted.author == "Maria Lopez"
    assert extracted.date == "2025-10-14T09:00:00Z"
    assert extracted.description == "A short summary of the patrol story."
    assert extracted.source == "LA Times"
    assert extracted.content == (
        "The neighborhood patrol program expanded to three new districts this week, officials said."
        "\n\n"
        "Residents have reported fewer incidents since volunteers began walking the area each evening."
    )


def test_parse_article_images(extractor):
    """Test og:image leads and logos and small images are dropped."""
    extracted = extractor.parse(ARTICLE_HTML, ARTICLE_URL)

    assert extracted.images == [
        "https://cdn.example.com/photos/cover.jpg",
        "https://www.latimes.com/photos/patrol.jpg",
    ]


def test_parse_meta_image_goes_first(extractor):
    """Test meta[itemprop=image] is placed ahead of og:image."""
    html = """
        <html><head>
          <meta property="og:image" content="https://cdn.example.com/og.jpg">
          <meta itemprop="image" content="https://cdn.example.com/item.jpg">
        </head><body><p>x</p></body></html>
    """

    extracted = extractor.parse(html, ARTICLE_URL)

    assert extracted.images == ["https://cdn.example.com/item.jpg", "https://cdn.example.com/og.jpg"]


def test_parse_fallback_paragraphs(extractor):
    """Test long paragraphs anywhere in the body are used without a container."""
    long_paragraphs = "".join(
        f"<p>Paragraph number {i} contains enough words to pass the length filter easily.</p>"
        for i in range(25)
    )
    html = f"<html><body><div class='wrapper'>{long_paragraphs}</div></body></html>"

    extracted = extractor.parse(html, "https://www.npr.org/2025/10/14/story")

    assert extracted.content.count("\n\n") == 19
    assert extracted.content.startswith("Paragraph number 0 ")
    assert extracted.source == "NPR"


def test_parse_empty_body(extractor):
    """Test pages without usable paragraphs get the placeholder content."""
    extracted = extractor.parse("<html><body><p>Too short.</p></body></html>", ARTICLE_URL)

    assert extracted.content == EXTRACTION_EMPTY_CONTENT


def test_parse_title_fallbacks(extractor):
    """Test og:title then <title> are used when no heading exists."""
    og_only = '<html><head><meta property="og:title" content="OG headline"></head><body></body></html>'
    title_only = "<html><head><title>Plain title | LA Times</title></head><body></body></html>"

    assert extractor.parse(og_only, ARTICLE_URL).title == "OG headline"
    assert extractor.parse(title_only, ARTICLE_URL).title == "Plain title"


def test_parse_date_from_time_element(extractor):
    """Test <time datetime> is read when no meta date exists."""
    html = '<html><body><time datetime="2025-10-01T12:00:00Z">Oct 1</time></body></html>'

    assert extractor.parse(html, ARTICLE_URL).date == "2025-10-01T12:00:00Z"


def test_registered_selector_takes_priority():
    """Test custom selectors can be added to a cascade."""
    extractor = ArticleExtractor()
    extractor.cascades["author"].register(TextSelector(".kicker-byline"), position=0)
    html = """
        <html><head><meta name="author" content="Meta Author"></head>
        <body><span class="kicker-byline">By  Custom   Author</span></body></html>
    """

    assert extractor.parse(html, ARTICLE_URL).author == "By Custom Author"


@pytest.mark.asyncio
async def test_extract_fetches_with_browser_headers():
    """Test page is requested with desktop browser headers."""
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, html=ARTICLE_HTML)

    extractor = ArticleExtractor(known_sources=KNOWN_SOURCES, transport=httpx.MockTransport(handler))

    extracted = await extractor.extract(ARTICLE_URL)

    assert extracted.title == "Community patrol expands"
    assert "Mozilla/5.0" in requests[0].headers["user-agent"]
    assert requests[0].headers["accept-language"] == "en-US,en;q=0.5"
    assert "text/html" in requests[0].headers["accept"]


@pytest.mark.asyncio
async def test_extract_http_error_returns_fallback():
    """Test non-2xx pages yield the unavailable placeholder."""
    extractor = ArticleExtractor(transport=httpx.MockTransport(lambda request: httpx.Response(404)))

    extracted = await extractor.extract(ARTICLE_URL)

    assert extracted.content == EXTRACTION_UNAVAILABLE_CONTENT
    assert extracted.source == "Unknown"
    assert extracted.title == ""
    assert extracted.images == []


@pytest.mark.asyncio
async def test_extract_network_error_returns_fallback():
    """Test connection failures never propagate."""
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    extractor = ArticleExtractor(transport=httpx.MockTransport(handler))

    extracted = await extractor.extract(ARTICLE_URL)

    assert extracted.content == EXTRACTION_UNAVAILABLE_CONTENT


def test_clean_title():
    """Test site suffixes are removed."""
    assert clean_title("Fire update - LA Times") == "Fire update"
    assert clean_title("Fire update - Los Angeles Times (Local)") == "Fire update"
    assert clean_title("Fire update | LA Times") == "Fire update"
    assert clean_title("Fire update - NPR") == "Fire update - NPR"


def test_remove_boilerplate():
    """Test automated-voice disclaimers are scrubbed."""
    text = "This article was read by an automated voice. Please report any issues or inconsistencies here. Body."

    assert remove_boilerplate(text) == "Body."
    assert remove_boilerplate("Read by an automated voice. Please report any issues. Body.") == "Body."


def test_source_from_url():
    """Test publisher name from hostname."""
    assert source_from_url("https://www.latimes.com/x", KNOWN_SOURCES) == "LA Times"
    assert source_from_url("https://www.example-news.com/x", KNOWN_SOURCES) == "Example-news"
    assert source_from_url("https://local.tribune.org/x", {}) == "Local"
    assert source_from_url("not a url", {}) == "Unknown"


def test_is_article_image():
    """Test image heuristics."""
    soup = BeautifulSoup(
        """
        <img id="plain" src="x">
        <img id="wide" width="640" height="100">
        <img id="tall" width="100" height="480">
        <img id="small" width="120" height="80">
        <img id="promo" alt="Advertisement">
        """,
        "html.parser",
    )

    def img(element_id):
        return soup.find("img", id=element_id)

    url = "https://cdn.example.com/photos/scene.jpg"
    assert is_article_image(url, img("plain"))
    assert is_article_image(url, img("wide"))
    assert is_article_image(url, img("tall"))
    assert not is_article_image(url, img("small"))
    assert not is_article_image(url, img("promo"))
    assert not is_article_image("https://cdn.example.com/icons/share.png", img("plain"))
    assert not is_article_image("https://cdn.example.com/avatar/1.jpg", img("plain"))
    # Loose substring match: "upload" contains "ad"
    assert not is_article_image("https://cdn.example.com/uploads/scene.jpg", img("plain"))
