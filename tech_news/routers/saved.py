from typing import List

from fastapi import APIRouter, Depends, Query, Response, status

from ..article_store import ArticleStore
from ..deps import get_store
from ..logging_setup import get_logger
from ..models import Article
from ..schema import SavedStatusOut

logger = get_logger("tech_news.routes.saved")

router = APIRouter(prefix="/saved", tags=["Saved articles"])

# Durable-storage failures are never reported here: responses only reflect
# the in-memory state.


@router.get("", response_model=List[Article])
def list_saved(store: ArticleStore = Depends(get_store)):
    return store.saved_articles


@router.post("", response_model=Article, status_code=status.HTTP_201_CREATED)
def save(article: Article, store: ArticleStore = Depends(get_store)):
    logger.info(f"Saving article: {article.url}")
    store.save(article)
    return article


@router.get("/status", response_model=SavedStatusOut)
def saved_status(url: str = Query(...), store: ArticleStore = Depends(get_store)):
    return SavedStatusOut(url=url, saved=store.is_saved(url))


@router.delete("/all", status_code=status.HTTP_204_NO_CONTENT)
def clear_all(store: ArticleStore = Depends(get_store)):
    logger.info("Clearing all saved articles")
    store.clear_all()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def remove(url: str = Query(...), store: ArticleStore = Depends(get_store)):
    logger.info(f"Removing saved article: {url}")
    store.remove(url)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
