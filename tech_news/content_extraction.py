# tech_news/content_extraction.py
from __future__ import annotations

import re
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

import httpx

from .logging_setup import get_logger
from .models import Article

logger = get_logger("tech_news.content_extraction")

MIN_CONTENT_CHARS = 500      # articles with more content than this are left alone
MAX_CONTENT_CHARS = 25000
TRUNCATION_MARKER = "\n\n[Content truncated for performance]"

_UNWANTED = [
    re.compile(r"^#+\s*(Navigation|Menu|Header).*$", re.MULTILINE),
    re.compile(r"^#+\s*(Footer|Copyright|Terms).*$", re.MULTILINE),
    re.compile(r"^\s*\[.*?\]\(.*?\)\s*$", re.MULTILINE),  # standalone links
    re.compile(r"^\s*\*\s*(Home|About|Contact|Privacy).*$", re.MULTILINE),
]


def clean_content(text: str) -> str:
    """Strip page chrome from scraped markdown and cap its length."""
    cleaned = re.sub(r"\n\s*\n\s*\n", "\n\n", text)
    cleaned = re.sub(r"[ \t]+", " ", cleaned).strip()
    for pattern in _UNWANTED:
        cleaned = pattern.sub("", cleaned)
    if len(cleaned) > MAX_CONTENT_CHARS:
        cleaned = cleaned[:MAX_CONTENT_CHARS] + TRUNCATION_MARKER
    return cleaned.strip()


class ContentEnhancer:
    """
    Fills in full article text through the Firecrawl scrape API.

    Any problem (no key, HTTP error, empty result) gives back the article as
    it was; enhancement is best effort.
    """

    def __init__(
        self,
        api_key: str = "",
        base_url: str = "https://api.firecrawl.dev/v0",
        timeout: float = 30,
        batch_size: int = 3,
        batch_delay: float = 0.5,
        client: Optional[httpx.Client] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.batch_size = max(1, batch_size)
        self.batch_delay = batch_delay
        self._client = client or httpx.Client(timeout=timeout)

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def extract(self, article: Article) -> Article:
        if not self.is_configured:
            logger.debug("FIRECRAWL_NOT_CONFIGURED", extra={"url": article.url})
            return article
        if article.content and len(article.content) > MIN_CONTENT_CHARS:
            return article

        try:
            r = self._client.post(
                f"{self.base_url}/scrape",
                headers={"Authorization": f"Bearer {self.api_key}"},
                json={
                    "url": article.url,
                    "formats": ["markdown"],
                    "onlyMainContent": True,
                    "removeBase64Images": True,
                },
            )
        except httpx.HTTPError as e:
            logger.warning("FIRECRAWL_REQUEST_FAILED", extra={"url": article.url, "error": type(e).__name__})
            return article

        if r.status_code != 200:
            logger.warning("FIRECRAWL_HTTP_ERROR", extra={"url": article.url, "status_code": r.status_code})
            return article

        try:
            markdown = (r.json().get("data") or {}).get("markdown")
        except ValueError:
            logger.warning("FIRECRAWL_BAD_JSON", extra={"url": article.url})
            return article
        if not markdown:
            return article

        return article.model_copy(update={"content": clean_content(markdown)})

    def extract_batch(self, articles: List[Article]) -> List[Article]:
        """Enhance `batch_size` articles at a time, pausing between batches. Order is kept."""
        enhanced: List[Article] = []
        with ThreadPoolExecutor(max_workers=self.batch_size) as pool:
            for i in range(0, len(articles), self.batch_size):
                batch = articles[i:i + self.batch_size]
                enhanced.extend(pool.map(self.extract, batch))
                if i + self.batch_size < len(articles):
                    time.sleep(self.batch_delay)
        return enhanced

    def close(self) -> None:
        self._client.close()
