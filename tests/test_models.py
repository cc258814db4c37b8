# tests/test_models.py
from datetime import datetime, timezone

import pytest

from tech_news.models import Article, parse_timestamp


def test_equality_is_by_url(make_article):
    a = make_article(url="https://x/1", title="A")
    b = make_article(url="https://x/1", title="B", description="different")
    c = make_article(url="https://x/2", title="A")
    assert a == b
    assert a != c
    assert len({a, b, c}) == 2


def test_from_json_newsapi_payload():
    a = Article.from_json({
        "title": "Flutter 3.27",
        "description": "Release notes",
        "content": None,
        "url": "https://docs.flutter.dev/release",
        "urlToImage": "https://img/flutter.png",
        "publishedAt": "2025-01-01T12:00:00Z",
    })
    assert a.image_url == "https://img/flutter.png"
    assert a.published_at == datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert a.to_json()["publishedAt"] == "2025-01-01T12:00:00+00:00"
    assert a.to_json()["urlToImage"] == "https://img/flutter.png"


def test_from_json_defaults_title_and_url():
    a = Article.from_json({"publishedAt": "2025-01-01T00:00:00Z"})
    assert a.title == ""
    assert a.url == ""


def test_from_json_requires_timestamp():
    with pytest.raises(ValueError):
        Article.from_json({"title": "t", "url": "https://x"})


def test_naive_timestamps_are_utc():
    assert parse_timestamp("2025-01-01T08:30:00") == datetime(2025, 1, 1, 8, 30, tzinfo=timezone.utc)
    assert parse_timestamp(datetime(2025, 1, 1)).tzinfo is timezone.utc


def test_row_round_trip(make_article):
    a = make_article(description="d", image_url="https://img")
    row = a.to_row()
    assert row["published_at"] == "2025-01-01T12:00:00+00:00"
    assert Article.from_row(row).model_dump() == a.model_dump()


@pytest.mark.parametrize("published_at", [None, "", "not a date"])
def test_from_row_rejects_bad_timestamp(make_article, published_at):
    row = dict(make_article().to_row(), published_at=published_at)
    with pytest.raises(ValueError):
        Article.from_row(row)


def test_from_row_rejects_missing_url(make_article):
    row = dict(make_article().to_row(), url=None)
    with pytest.raises(ValueError):
        Article.from_row(row)
