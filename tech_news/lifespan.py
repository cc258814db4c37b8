# tech_news/lifespan.py
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool

from .logging_setup import get_logger

logger = get_logger("tech_news.lifespan")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load saved articles and the first headlines off the event loop; flush on the way out."""
    logger.info("APP STARTUP")
    store = app.state.store
    feed = app.state.feed

    # never raises: an unavailable store just starts empty
    await run_in_threadpool(store.load)

    if app.state.settings.fetch_on_startup:
        await run_in_threadpool(feed.fetch_top_headlines)

    yield

    logger.info("APP SHUTDOWN")
    # waits for queued durable writes before the backend goes away
    await run_in_threadpool(store.close)
    if feed.enhancer is not None:
        feed.enhancer.close()
