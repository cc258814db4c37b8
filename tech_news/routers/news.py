from fastapi import APIRouter, Depends, Query

from ..deps import get_feed
from ..feed import NewsFeed
from ..logging_setup import get_logger
from ..schema import FeedOut

logger = get_logger("tech_news.routes.news")

router = APIRouter(prefix="/news", tags=["News"])


def _out(feed: NewsFeed) -> FeedOut:
    return FeedOut(
        query=feed.search_query,
        is_loading=feed.is_loading,
        is_extracting_content=feed.is_extracting_content,
        articles=feed.articles,
    )


@router.get("", response_model=FeedOut)
def current(feed: NewsFeed = Depends(get_feed)):
    """The list currently on display (last headlines fetch or search)."""
    return _out(feed)


@router.get("/headlines", response_model=FeedOut)
def headlines(feed: NewsFeed = Depends(get_feed)):
    feed.fetch_top_headlines()
    return _out(feed)


@router.get("/search", response_model=FeedOut)
def search(q: str = Query(..., min_length=1, description="Search terms"), feed: NewsFeed = Depends(get_feed)):
    logger.info(f"Search requested: {q!r}")
    feed.search(q)
    return _out(feed)


@router.post("/enhance", response_model=FeedOut)
def enhance(feed: NewsFeed = Depends(get_feed)):
    """Fetch full text for the current list (no-op unless Firecrawl is configured)."""
    feed.enhance_current_articles()
    return _out(feed)
