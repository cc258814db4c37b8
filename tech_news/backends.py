"""Durable mirrors for the saved-articles set."""

from __future__ import annotations

import threading
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, literal_column
from sqlalchemy.engine import Engine
from sqlmodel import select

from .config import Settings
from .logging_setup import get_logger
from .models import SavedArticle
from .store import get_session, init_db, make_engine

logger = get_logger("tech_news.backends")

Row = Dict[str, Any]


class ArticleBackend:
    """Row-level storage for saved articles, keyed by url."""

    name = "base"

    def load_all(self) -> List[Row]:
        raise NotImplementedError

    def upsert(self, row: Row) -> None:
        raise NotImplementedError

    def delete(self, url: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError

    def close(self) -> None:
        pass


class SqlArticleBackend(ArticleBackend):
    """saved_articles table in a SQLite file. The schema is prepared on first use."""

    name = "sqlite"

    def __init__(self, engine: Engine):
        self.engine = engine
        self._ready = False
        self._init_lock = threading.Lock()

    def _ensure_ready(self) -> None:
        if self._ready:
            return
        with self._init_lock:
            if not self._ready:
                init_db(self.engine)
                self._ready = True

    def load_all(self) -> List[Row]:
        self._ensure_ready()
        with get_session(self.engine) as s:
            # rowid survives in-place updates, so this is first-save order
            rows = s.exec(select(SavedArticle).order_by(literal_column("rowid"))).all()
            return [row.model_dump() for row in rows]

    def upsert(self, row: Row) -> None:
        self._ensure_ready()
        with get_session(self.engine) as s:
            # merge() updates an existing url in place instead of raising on the primary key
            s.merge(SavedArticle(**row))
            s.commit()

    def delete(self, url: str) -> None:
        self._ensure_ready()
        with get_session(self.engine) as s:
            row = s.get(SavedArticle, url)
            if row is not None:
                s.delete(row)
                s.commit()

    def clear(self) -> None:
        self._ensure_ready()
        with get_session(self.engine) as s:
            s.exec(delete(SavedArticle))
            s.commit()

    def close(self) -> None:
        self.engine.dispose()


class MemoryArticleBackend(ArticleBackend):
    """Process-local stand-in for the SQLite file. Share one instance to simulate restarts."""

    name = "memory"

    def __init__(self, rows: Optional[List[Row]] = None):
        self._rows: Dict[str, Row] = {}
        self._lock = threading.Lock()
        for row in rows or []:
            self._rows[row["url"]] = dict(row)

    def load_all(self) -> List[Row]:
        with self._lock:
            return [dict(row) for row in self._rows.values()]

    def upsert(self, row: Row) -> None:
        with self._lock:
            self._rows[row["url"]] = dict(row)

    def delete(self, url: str) -> None:
        with self._lock:
            self._rows.pop(url, None)

    def clear(self) -> None:
        with self._lock:
            self._rows.clear()


def create_backend(settings: Settings) -> Optional[ArticleBackend]:
    """
    Pick the durable mirror for `settings.storage_backend`.
    "none" returns None: the saved set then lives for the session only.
    """
    kind = settings.storage_backend
    if kind == "sqlite":
        return SqlArticleBackend(make_engine(settings.db_url))
    if kind == "memory":
        return MemoryArticleBackend()
    if kind == "none":
        logger.warning("SESSION_ONLY_STORAGE", extra={"storage_backend": kind})
        return None
    raise ValueError(f"unknown storage backend: {kind!r}")
