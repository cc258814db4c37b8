from fastapi import Request

from .article_store import ArticleStore
from .feed import NewsFeed


def get_store(request: Request) -> ArticleStore:
    return request.app.state.store


def get_feed(request: Request) -> NewsFeed:
    return request.app.state.feed
