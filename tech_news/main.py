# tech_news/main.py
from typing import Optional

from fastapi import FastAPI

from .article_store import ArticleStore
from .backends import create_backend
from .config import Settings, load_settings
from .content_extraction import ContentEnhancer
from .exception_handling import register_exception_handlers
from .feed import NewsFeed
from .lifespan import lifespan
from .logging_setup import setup_logging, get_logger
from .middleware import RequestContextMiddleware
from .sources import build_source

from .routers import health, news, saved

logger = get_logger("tech_news.main")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Compose the application: one ArticleStore and one NewsFeed per app,
    both built from `settings` and reachable through app.state.
    """
    settings = settings or load_settings()

    app = FastAPI(title="Tech News", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = ArticleStore(create_backend(settings))

    enhancer = None
    if settings.firecrawl_api_key:
        enhancer = ContentEnhancer(settings.firecrawl_api_key, base_url=settings.firecrawl_base_url)
    app.state.feed = NewsFeed(build_source(settings), enhancer=enhancer, enhance_on_fetch=settings.enhance_on_fetch)

    app.add_middleware(RequestContextMiddleware)
    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(news.router)
    app.include_router(saved.router)

    logger.info(
        "APP_CREATED",
        extra={"storage_backend": settings.storage_backend, "feed_source": settings.feed_source},
    )
    return app


setup_logging()
app = create_app()
