# tech_news/sources.py
"""
Feed sources for the news list.
Sources:
  - MockFeedSource: fixed tech headlines + keyword search, no network
  - NewsAPISource: requires NEWSAPI_KEY
  - GoogleNewsRSSSource: query-driven RSS, no API key

Every source answers fetch_top_headlines() and search(query). A query the
source knows nothing about gives an empty list, not an error.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Sequence, Tuple
from urllib.parse import quote_plus
import requests
import feedparser

from .config import Settings
from .logging_setup import get_logger
from .models import Article

logger = get_logger("tech_news.sources")

# ---------- Utilities ----------

def _utc_now() -> datetime:
    return datetime.now(timezone.utc)

def _entry_datetime(entry) -> Optional[datetime]:
    """Publication time of a feed entry; feedparser normalises it to a UTC struct_time."""
    tt = getattr(entry, "published_parsed", None) or getattr(entry, "updated_parsed", None)
    if not tt:
        return None
    try:
        return datetime(*tt[:6], tzinfo=timezone.utc)
    except (TypeError, ValueError):
        return None

def _dedupe(articles: List[Article]) -> List[Article]:
    """Keep the first article for each url."""
    seen: set[str] = set()
    out: List[Article] = []
    for a in articles:
        key = a.url.strip().lower()
        if not key or key in seen:
            continue
        seen.add(key)
        out.append(a)
    return out

# ---------- Source base ----------

class FeedSource:
    name = "base"

    def fetch_top_headlines(self) -> List[Article]:
        raise NotImplementedError

    def search(self, query: str) -> List[Article]:
        raise NotImplementedError

# ---------- Mock (offline fixture) ----------

# (url, title, description, image, hours ago)
_HEADLINES: List[Tuple[str, str, str, str, int]] = [
    (
        "https://www.techradar.com/ai-platforms-assistants/chatgpt/openais-ceo-says-hes-scared-of-gpt-5",
        "OpenAI's CEO says he's scared of GPT-5",
        "Sam Altman expresses concerns about the potential risks and capabilities of OpenAI's next-generation AI model.",
        "https://images.unsplash.com/photo-1677442136019-21780ecad995?w=400&h=250&fit=crop",
        2,
    ),
    (
        "https://developers.googleblog.com/en/adding-support-for-google-pay-within-android-webview/",
        "Adding support for Google Pay within Android WebView",
        "Google Pay can now be used inside Android WebView, simplifying checkout in hybrid apps.",
        "https://images.unsplash.com/photo-1556742049-0cfed4f6a45d?w=400&h=250&fit=crop",
        4,
    ),
    (
        "https://docs.flutter.dev/release/release-notes/release-notes-3.27.0",
        "Flutter 3.27 Release Notes - Latest Features and Improvements",
        "Flutter 3.27 brings rendering, tooling and platform-integration improvements.",
        "https://images.unsplash.com/photo-1551650975-87deedd944c3?w=400&h=250&fit=crop",
        6,
    ),
    (
        "https://github.blog/news-insights/product-news/github-copilot-meet-the-new-coding-agent/",
        "GitHub Copilot: Meet the new coding agent",
        "GitHub introduces an asynchronous coding agent that works on issues and opens pull requests.",
        "https://images.unsplash.com/photo-1618401471353-b98afee0b2eb?w=400&h=250&fit=crop",
        8,
    ),
    (
        "https://www.apple.com/newsroom/2024/10/apple-intelligence-is-available-today-on-iphone-ipad-and-mac/",
        "Apple Intelligence arrives on iPhone, iPad, and Mac with iOS 18.1",
        "Apple's personal intelligence system rolls out with writing tools, a new Siri and photo cleanup.",
        "https://images.unsplash.com/photo-1611532736597-de2d4265fba3?w=400&h=250&fit=crop",
        12,
    ),
]

# Checked in order; the first topic with a keyword contained in the query wins.
_SEARCH_TOPICS: List[Tuple[Sequence[str], List[Tuple[str, str, str, int]]]] = [
    (("ai", "artificial intelligence"), [
        ("https://www.theverge.com/2024/5/14/24156455/google-search-ai-results-page-gemini-overview",
         "Google is redesigning its search engine - and it's AI all the way down",
         "The company is moving fast to stay competitive with new AI search products.", 3),
        ("https://openai.com/index/learning-to-reason-with-llms/",
         "OpenAI announces o1 reasoning model with enhanced problem-solving capabilities",
         "OpenAI releases o1, a new AI model designed for complex reasoning tasks in science, coding, and mathematics.", 16),
    ]),
    (("flutter", "mobile"), [
        ("https://docs.flutter.dev/release/release-notes/release-notes-3.27.0",
         "Flutter 3.27 Release Notes - Latest Features and Improvements",
         "Flutter 3.27 brings rendering, tooling and platform-integration improvements.", 6),
        ("https://techcrunch.com/2024/07/18/microsoft-edge-is-now-an-ai-browser-with-launch-of-copilot-mode/",
         "Microsoft Edge is now an AI browser with launch of Copilot Mode",
         "Edge browser gets enhanced AI capabilities with new Copilot integration for smarter web browsing.", 10),
    ]),
    (("apple", "ios"), [
        ("https://www.apple.com/newsroom/2024/10/apple-intelligence-is-available-today-on-iphone-ipad-and-mac/",
         "Apple Intelligence arrives on iPhone, iPad, and Mac with iOS 18.1",
         "Apple's personal intelligence system rolls out with writing tools, a new Siri and photo cleanup.", 12),
        ("https://github.blog/changelog/2024-11-14-github-copilot-chat-in-vs-code-can-now-help-you-fix-test-failures/",
         "GitHub Copilot Chat in VS Code can now help you fix test failures",
         "Copilot Chat can now diagnose and propose fixes for failing tests.", 20),
    ]),
    (("web", "javascript", "node"), [
        ("https://draft.dev/learn/whats-working-in-developer-marketing-today",
         "What's Working in Developer Marketing Today: Insights from Industry Leaders",
         "Industry leaders share what actually reaches developers today.", 5),
        ("https://www.roadtovr.com/meta-quest-3s-review-affordable-mixed-reality/",
         "Meta Quest 3S launches as affordable entry into mixed reality",
         "Meta's cheaper headset brings mixed reality to a wider audience.", 9),
    ]),
]


class MockFeedSource(FeedSource):
    """
    Static stand-in for a news API. Search matches topic keywords as plain
    substrings of the lower-cased query, so "email" also hits the AI topic.
    """

    name = "mock"

    def fetch_top_headlines(self) -> List[Article]:
        now = _utc_now()
        return [
            Article(
                title=title,
                description=description,
                content=description,
                url=url,
                image_url=image,
                published_at=now - timedelta(hours=hours),
            )
            for url, title, description, image, hours in _HEADLINES
        ]

    def search(self, query: str) -> List[Article]:
        q = query.lower()
        now = _utc_now()
        for keywords, results in _SEARCH_TOPICS:
            if any(k in q for k in keywords):
                return [
                    Article(
                        title=title,
                        description=description,
                        content=description,
                        url=url,
                        published_at=now - timedelta(hours=hours),
                    )
                    for url, title, description, hours in results
                ]
        return []

# ---------- NewsAPI ----------

class NewsAPISource(FeedSource):
    """
    https://newsapi.org/: /top-headlines (technology) and /everything
    Note: free key is for dev/testing; check TOS for production.
    """

    name = "newsapi"
    BASE_URL = "https://newsapi.org/v2"

    def __init__(self, api_key: str, page_size: int = 30, timeout: int = 15):
        self.api_key = api_key
        self.page_size = page_size
        self.timeout = timeout

    def _get(self, endpoint: str, params: Dict[str, object]) -> List[Article]:
        headers = {"X-Api-Key": self.api_key}
        r = requests.get(f"{self.BASE_URL}/{endpoint}", params=params, headers=headers, timeout=self.timeout)
        r.raise_for_status()
        data = r.json()
        articles: List[Article] = []
        for a in data.get("articles", []):
            try:
                article = Article.from_json(a)
            except ValueError:
                logger.debug("NEWSAPI_ITEM_SKIPPED", extra={"url": a.get("url")})
                continue
            if article.url:
                articles.append(article)
        return _dedupe(articles)

    def fetch_top_headlines(self) -> List[Article]:
        return self._get("top-headlines", {
            "category": "technology",
            "language": "en",
            "pageSize": min(self.page_size, 100),
        })

    def search(self, query: str) -> List[Article]:
        if not query.strip():
            return []
        return self._get("everything", {
            "q": query,
            "sortBy": "publishedAt",
            "language": "en",
            "pageSize": min(self.page_size, 100),
        })

# ---------- Google News RSS (query-based) ----------

class GoogleNewsRSSSource(FeedSource):
    """
    Uses Google News RSS search. Pros: free, no key. Cons: RSS snippets are
    short and publication time can be missing (fetch time is used then).
    """

    name = "google_news_rss"

    def __init__(self, lang: str = "en", country: str = "US", headline_topic: str = "technology", max_items: int = 30):
        self.lang = lang
        self.country = country
        self.ceid = f"{country}:{lang}"
        self.headline_topic = headline_topic
        self.max_items = max_items

    def _build_url(self, query: str) -> str:
        return (
            "https://news.google.com/rss/search?"
            f"q={quote_plus(query)}&hl={self.lang}&gl={self.country}&ceid={self.ceid}"
        )

    def _fetch(self, query: str) -> List[Article]:
        feed = feedparser.parse(self._build_url(query))
        fetched_at = _utc_now()
        articles: List[Article] = []
        for e in feed.entries[: self.max_items]:
            link = getattr(e, "link", "")
            if not link:
                continue
            articles.append(Article(
                title=getattr(e, "title", ""),
                description=getattr(e, "summary", None),
                url=link,
                published_at=_entry_datetime(e) or fetched_at,
            ))
        return _dedupe(articles)

    def fetch_top_headlines(self) -> List[Article]:
        return self._fetch(self.headline_topic)

    def search(self, query: str) -> List[Article]:
        if not query.strip():
            return []
        return self._fetch(query)

# ---------- Factory ----------

def build_source(settings: Settings) -> FeedSource:
    kind = settings.feed_source
    if kind == "newsapi":
        if settings.newsapi_key:
            return NewsAPISource(settings.newsapi_key)
        logger.warning("NEWSAPI_KEY_MISSING", extra={"fallback": MockFeedSource.name})
        return MockFeedSource()
    if kind == "google_news":
        return GoogleNewsRSSSource()
    if kind == "mock":
        return MockFeedSource()
    raise ValueError(f"unknown feed source: {kind!r}")
