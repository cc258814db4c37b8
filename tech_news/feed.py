"""Currently displayed news list. Nothing here is persisted."""

from __future__ import annotations

from typing import List, Optional

from .content_extraction import ContentEnhancer
from .logging_setup import get_logger
from .models import Article
from .sources import FeedSource

logger = get_logger("tech_news.feed")


class NewsFeed:
    def __init__(
        self,
        source: FeedSource,
        enhancer: Optional[ContentEnhancer] = None,
        enhance_on_fetch: bool = False,
    ):
        self.source = source
        self.enhancer = enhancer
        self.enhance_on_fetch = enhance_on_fetch
        self.articles: List[Article] = []
        self.search_query = ""
        self.is_loading = False
        self.is_extracting_content = False

    def fetch_top_headlines(self) -> List[Article]:
        """On failure the previous list stays on display."""
        self.is_loading = True
        try:
            self.articles = self.source.fetch_top_headlines()
            logger.info("HEADLINES_FETCHED", extra={"source": self.source.name, "count": len(self.articles)})
        except Exception as e:
            logger.exception("FETCH_FAILED", extra={"handled": True, "source": self.source.name, "error": type(e).__name__})
            return self.articles
        finally:
            self.is_loading = False
        self._maybe_enhance()
        return self.articles

    def search(self, query: str) -> List[Article]:
        self.search_query = query
        self.is_loading = True
        try:
            self.articles = self.source.search(query)
            logger.info("SEARCH_DONE", extra={"source": self.source.name, "query": query, "count": len(self.articles)})
        except Exception as e:
            logger.exception("SEARCH_FAILED", extra={"handled": True, "query": query, "error": type(e).__name__})
            return self.articles
        finally:
            self.is_loading = False
        self._maybe_enhance()
        return self.articles

    def _maybe_enhance(self) -> None:
        if self.enhance_on_fetch:
            self.enhance_current_articles()

    def enhance_current_articles(self) -> List[Article]:
        if not self.articles or self.enhancer is None or not self.enhancer.is_configured:
            logger.debug("ENHANCE_SKIPPED", extra={"count": len(self.articles)})
            return self.articles

        self.is_extracting_content = True
        try:
            self.articles = self.enhancer.extract_batch(self.articles)
            logger.info("ARTICLES_ENHANCED", extra={"count": len(self.articles)})
        except Exception as e:
            logger.exception("ENHANCE_FAILED", extra={"handled": True, "error": type(e).__name__})
        finally:
            self.is_extracting_content = False
        return self.articles
