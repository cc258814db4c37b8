from fastapi import APIRouter, Depends

from ..article_store import ArticleStore
from ..deps import get_store
from ..logging_setup import get_logger

logger = get_logger("tech_news.routes.health")

router = APIRouter()

@router.get("/health")
def health():
    logger.debug("Health check invoked")
    return {"status": "ok"}

@router.get("/health/storage")
def storage_health(store: ArticleStore = Depends(get_store)):
    return {
        "durable": store.is_durable,
        "backend": store.backend.name if store.backend is not None else "none",
        "saved": len(store),
    }
