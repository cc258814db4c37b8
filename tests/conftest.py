# tests/conftest.py
import pathlib, pytest
from datetime import datetime, timezone
from dotenv import load_dotenv

load_dotenv(pathlib.Path(__file__).parent / ".env.test", override=True)

from tech_news.article_store import ArticleStore
from tech_news.backends import MemoryArticleBackend, SqlArticleBackend
from tech_news.config import load_settings
from tech_news.models import Article
from tech_news.store import make_engine


def _make_article(url="https://x/1", title="A", **fields):
    fields.setdefault("published_at", datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc))
    return Article(url=url, title=title, **fields)


@pytest.fixture()
def make_article():
    return _make_article


@pytest.fixture()
def settings():
    return load_settings()

@pytest.fixture()
def backend():
    return MemoryArticleBackend()

@pytest.fixture()
def store(backend):
    s = ArticleStore(backend)
    s.load()
    yield s
    s.close()

@pytest.fixture()
def db_url(tmp_path):
    return f"sqlite:///{tmp_path / 'tech_news.db'}"

@pytest.fixture()
def sql_backend(db_url):
    b = SqlArticleBackend(make_engine(db_url))
    yield b
    b.close()

@pytest.fixture()
def client(settings):
    from fastapi.testclient import TestClient
    from tech_news.main import create_app
    with TestClient(create_app(settings)) as c:
        yield c
