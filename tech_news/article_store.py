"""
Saved-article cache.

The in-memory set is authoritative for the running process. Every change is
applied to it and announced to observers synchronously; only then is the
matching durable operation handed to a single background worker. Durable
failures are logged and reported to failure listeners, never raised and never
rolled back into the in-memory set.

Listeners run with the store lock held, so they must not wait on another
thread that calls into the same store.
"""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .backends import ArticleBackend
from .logging_setup import get_logger
from .models import Article

logger = get_logger("tech_news.article_store")


@dataclass(frozen=True)
class StoreEvent:
    kind: str  # loaded | saved | removed | cleared
    url: Optional[str] = None


@dataclass(frozen=True)
class DurabilityFailure:
    operation: str  # load | load_row | upsert | delete | clear
    url: Optional[str]
    error: BaseException


Listener = Callable[[StoreEvent], None]
FailureListener = Callable[[DurabilityFailure], None]


class ArticleStore:
    def __init__(self, backend: Optional[ArticleBackend] = None):
        """`backend=None` keeps saved articles for this session only."""
        self.backend = backend
        self._articles: Dict[str, Article] = {}
        self._lock = threading.RLock()
        self._listeners: List[Listener] = []
        self._failure_listeners: List[FailureListener] = []
        self._pending: List[Future] = []
        # one worker: durable operations apply in the order they were dispatched
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="article-mirror")
        self._closed = False

    # ---------- queries ----------

    @property
    def saved_articles(self) -> List[Article]:
        with self._lock:
            return list(self._articles.values())

    @property
    def is_durable(self) -> bool:
        return self.backend is not None

    def is_saved(self, url: str) -> bool:
        return url in self._articles

    def get(self, url: str) -> Optional[Article]:
        return self._articles.get(url)

    def __len__(self) -> int:
        return len(self._articles)

    # ---------- observers ----------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def on_durability_failure(self, listener: FailureListener) -> Callable[[], None]:
        self._failure_listeners.append(listener)
        return lambda: self._failure_listeners.remove(listener)

    def _notify(self, event: StoreEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("LISTENER_FAILED", extra={"event": event.kind, "url": event.url})

    def _report(self, failure: DurabilityFailure) -> None:
        for listener in list(self._failure_listeners):
            try:
                listener(failure)
            except Exception:
                logger.exception("FAILURE_LISTENER_FAILED", extra={"operation": failure.operation})

    # ---------- operations ----------

    def load(self) -> List[Article]:
        """
        Replace the in-memory set with what the durable store holds.

        Never raises: an unavailable store yields an empty set, and rows that
        cannot be turned back into articles are skipped one by one.
        """
        self.flush()
        rows: List[Dict[str, Any]] = []
        if self.backend is not None:
            try:
                rows = self.backend.load_all()
            except Exception as e:
                logger.warning(
                    "LOAD_FAILED",
                    exc_info=True,
                    extra={"handled": True, "backend": self.backend.name, "error": type(e).__name__},
                )
                self._report(DurabilityFailure("load", None, e))
                rows = []

        loaded: Dict[str, Article] = {}
        skipped = 0
        for row in rows:
            try:
                article = Article.from_row(row)
            except ValueError as e:
                skipped += 1
                logger.warning(
                    "LOAD_ROW_SKIPPED",
                    extra={"handled": True, "url": row.get("url"), "error": str(e)},
                )
                self._report(DurabilityFailure("load_row", row.get("url"), e))
                continue
            loaded[article.url] = article

        with self._lock:
            self._articles = loaded
            snapshot = list(loaded.values())
        logger.info("SAVED_ARTICLES_LOADED", extra={"count": len(snapshot), "skipped": skipped})
        self._notify(StoreEvent("loaded"))
        return snapshot

    def save(self, article: Article) -> Optional[Future]:
        """Insert, or replace the fields of the entry with the same url (last write wins)."""
        # held through dispatch so the mirror sees writes in the same order as memory
        with self._lock:
            self._articles[article.url] = article
            self._notify(StoreEvent("saved", article.url))
            return self._dispatch("upsert", article.url, self._upsert, article.to_row())

    def remove(self, url: str) -> Optional[Future]:
        """Drop the entry for `url`. Removing an unknown url is not an error."""
        with self._lock:
            if self._articles.pop(url, None) is not None:
                self._notify(StoreEvent("removed", url))
            return self._dispatch("delete", url, self._delete, url)

    def clear_all(self) -> Optional[Future]:
        with self._lock:
            self._articles = {}
            self._notify(StoreEvent("cleared"))
            return self._dispatch("clear", None, self._clear)

    # ---------- durable mirror ----------

    def _upsert(self, row: Dict[str, Any]) -> None:
        self.backend.upsert(row)

    def _delete(self, url: str) -> None:
        self.backend.delete(url)

    def _clear(self) -> None:
        self.backend.clear()

    def _dispatch(self, operation: str, url: Optional[str], fn: Callable, *args) -> Optional[Future]:
        if self.backend is None or self._closed:
            return None
        future = self._executor.submit(self._run_durable, operation, url, fn, *args)
        with self._lock:
            # failed operations stay listed until the next flush() reports them
            self._pending = [f for f in self._pending if not (f.done() and f.result())]
            self._pending.append(future)
        logger.debug("DURABLE_OP_DISPATCHED", extra={"operation": operation, "url": url})
        return future

    def _run_durable(self, operation: str, url: Optional[str], fn: Callable, *args) -> bool:
        try:
            fn(*args)
        except Exception as e:
            logger.warning(
                "DURABLE_OP_FAILED",
                exc_info=True,
                extra={"handled": True, "operation": operation, "url": url, "error": type(e).__name__},
            )
            self._report(DurabilityFailure(operation, url, e))
            return False
        return True

    def flush(self, timeout: Optional[float] = None) -> bool:
        """Wait for durable operations dispatched since the last flush. True when all succeeded."""
        with self._lock:
            pending = list(self._pending)
        if not pending:
            return True
        done, not_done = wait(pending, timeout=timeout)
        with self._lock:
            self._pending = [f for f in self._pending if not f.done()]
        return not not_done and all(f.result() for f in done)

    def close(self) -> None:
        if self._closed:
            return
        self.flush()
        self._closed = True
        self._executor.shutdown(wait=True)
        if self.backend is not None:
            self.backend.close()
