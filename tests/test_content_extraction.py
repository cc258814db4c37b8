# tests/test_content_extraction.py
import json

import httpx

from tech_news.content_extraction import (
    MAX_CONTENT_CHARS,
    TRUNCATION_MARKER,
    ContentEnhancer,
    clean_content,
)


def _enhancer(handler, **kwargs):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return ContentEnhancer(api_key="key", client=client, batch_delay=0, **kwargs)


def test_clean_content_strips_chrome():
    raw = (
        "# Navigation bar\n"
        "Real   first\tparagraph.\n\n\n\n"
        "[Home](https://site/)\n"
        "* About us\n"
        "Second paragraph.\n"
        "## Footer links\n"
    )
    cleaned = clean_content(raw)
    assert "Navigation" not in cleaned
    assert "Footer" not in cleaned
    assert "[Home]" not in cleaned
    assert "About us" not in cleaned
    assert "Real first paragraph." in cleaned
    assert "Second paragraph." in cleaned


def test_clean_content_truncates():
    cleaned = clean_content("x" * (MAX_CONTENT_CHARS + 10))
    assert cleaned.endswith(TRUNCATION_MARKER.strip())
    assert len(cleaned) == MAX_CONTENT_CHARS + len(TRUNCATION_MARKER)


def test_extract_fills_content(make_article):
    seen = {}

    def handler(request):
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"data": {"markdown": "Full   text of the story."}})

    enhancer = _enhancer(handler)
    a = make_article(content="short")
    out = enhancer.extract(a)

    assert out.content == "Full text of the story."
    assert out.url == a.url and out.title == a.title
    assert a.content == "short"
    assert seen["auth"] == "Bearer key"
    assert seen["body"]["url"] == a.url
    assert seen["body"]["onlyMainContent"] is True


def test_extract_keeps_long_content(make_article):
    def handler(request):
        raise AssertionError("should not be called")

    a = make_article(content="y" * 600)
    assert _enhancer(handler).extract(a) is a


def test_extract_unconfigured_returns_article(make_article):
    a = make_article()
    assert ContentEnhancer(api_key="").extract(a) is a


def test_extract_http_error_returns_article(make_article):
    a = make_article()
    assert _enhancer(lambda r: httpx.Response(402, json={"error": "quota"})).extract(a) is a


def test_extract_transport_error_returns_article(make_article):
    def handler(request):
        raise httpx.ConnectError("down", request=request)

    a = make_article()
    assert _enhancer(handler).extract(a) is a


def test_extract_empty_markdown_returns_article(make_article):
    a = make_article()
    assert _enhancer(lambda r: httpx.Response(200, json={"data": {}})).extract(a) is a


def test_extract_batch_preserves_order(make_article):
    def handler(request):
        url = json.loads(request.content)["url"]
        return httpx.Response(200, json={"data": {"markdown": f"body of {url}"}})

    articles = [make_article(url=f"https://x/{i}") for i in range(7)]
    out = _enhancer(handler, batch_size=3).extract_batch(articles)
    assert [a.url for a in out] == [a.url for a in articles]
    assert [a.content for a in out] == [f"body of https://x/{i}" for i in range(7)]
