# tests/test_api.py
import asyncio
from dataclasses import replace

from fastapi.testclient import TestClient

from tech_news.main import create_app

ARTICLE = {
    "title": "A",
    "url": "https://x/1",
    "description": "d",
    "published_at": "2025-01-01T12:00:00Z",
}


def test_headlines_fetched_on_startup(client):
    body = client.get("/news").json()
    assert body["query"] == ""
    assert body["is_loading"] is False
    assert len(body["articles"]) == 5


def test_search(client):
    body = client.get("/news/search", params={"q": "Apple"}).json()
    assert body["query"] == "Apple"
    assert "apple" in body["articles"][0]["title"].lower()

    assert client.get("/news/search", params={"q": "nonexistentquery123"}).json()["articles"] == []
    assert client.get("/news/search").status_code == 422


def test_save_list_status_remove(client):
    r = client.post("/saved", json=ARTICLE)
    assert r.status_code == 201
    assert client.get("/saved/status", params={"url": ARTICLE["url"]}).json() == {"url": ARTICLE["url"], "saved": True}

    client.post("/saved", json={**ARTICLE, "title": "B"})
    saved = client.get("/saved").json()
    assert [(a["url"], a["title"]) for a in saved] == [("https://x/1", "B")]

    assert client.delete("/saved", params={"url": ARTICLE["url"]}).status_code == 204
    assert client.delete("/saved", params={"url": ARTICLE["url"]}).status_code == 204
    assert client.get("/saved").json() == []


def test_clear_all(client):
    for i in range(3):
        client.post("/saved", json={**ARTICLE, "url": f"https://x/{i}"})
    assert client.delete("/saved/all").status_code == 204
    assert client.get("/saved").json() == []
    for i in range(3):
        assert client.get("/saved/status", params={"url": f"https://x/{i}"}).json()["saved"] is False


def test_save_requires_published_at(client):
    r = client.post("/saved", json={"title": "A", "url": "https://x/1"})
    assert r.status_code == 422


def test_saved_articles_survive_restart(settings, db_url):
    settings = replace(settings, storage_backend="sqlite", db_url=db_url, fetch_on_startup=False)
    with TestClient(create_app(settings)) as c:
        c.post("/saved", json=ARTICLE)
    # shutdown flushed the durable write
    with TestClient(create_app(settings)) as c:
        assert [a["url"] for a in c.get("/saved").json()] == [ARTICLE["url"]]


def test_durable_failure_is_not_surfaced(settings, mocker):
    app = create_app(replace(settings, fetch_on_startup=False))
    mocker.patch.object(app.state.store.backend, "upsert", side_effect=OSError("read-only"))
    with TestClient(app) as c:
        assert c.post("/saved", json=ARTICLE).status_code == 201
        assert c.get("/saved/status", params={"url": ARTICLE["url"]}).json()["saved"] is True


def test_session_only_storage(settings):
    with TestClient(create_app(replace(settings, storage_backend="none", fetch_on_startup=False))) as c:
        c.post("/saved", json=ARTICLE)
        assert len(c.get("/saved").json()) == 1
        assert c.get("/health/storage").json()["durable"] is False


def _on_event_loop():
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


def test_startup_io_runs_off_the_event_loop(settings, mocker):
    app = create_app(settings)
    seen = {}

    def record(name):
        def side_effect():
            seen[name] = _on_event_loop()
            return []
        return side_effect

    mocker.patch.object(app.state.store, "load", side_effect=record("load"))
    mocker.patch.object(app.state.feed, "fetch_top_headlines", side_effect=record("headlines"))

    with TestClient(app) as c:
        assert c.get("/health").status_code == 200
    assert seen == {"load": False, "headlines": False}
