# tests/test_feed.py
from tech_news.content_extraction import ContentEnhancer
from tech_news.feed import NewsFeed
from tech_news.sources import MockFeedSource


def test_fetch_top_headlines():
    feed = NewsFeed(MockFeedSource())
    items = feed.fetch_top_headlines()
    assert items and feed.articles == items
    assert feed.is_loading is False


def test_search_records_query():
    feed = NewsFeed(MockFeedSource())
    feed.search("Flutter")
    assert feed.search_query == "Flutter"
    assert "flutter" in feed.articles[0].title.lower()

    feed.search("nonexistentquery123")
    assert feed.search_query == "nonexistentquery123"
    assert feed.articles == []


def test_source_failure_keeps_previous_list(mocker):
    source = MockFeedSource()
    feed = NewsFeed(source)
    before = feed.fetch_top_headlines()

    mocker.patch.object(source, "search", side_effect=ConnectionError("offline"))
    assert feed.search("AI") == before
    assert feed.search_query == "AI"
    assert feed.is_loading is False

    mocker.patch.object(source, "fetch_top_headlines", side_effect=ConnectionError("offline"))
    assert feed.fetch_top_headlines() == before


def test_enhance_on_fetch(mocker):
    enhancer = ContentEnhancer(api_key="k")
    extract_batch = mocker.patch.object(enhancer, "extract_batch", side_effect=lambda xs: xs[:1])
    feed = NewsFeed(MockFeedSource(), enhancer=enhancer, enhance_on_fetch=True)

    feed.fetch_top_headlines()
    extract_batch.assert_called_once()
    assert len(feed.articles) == 1
    assert feed.is_extracting_content is False
    enhancer.close()


def test_enhance_skipped_without_key(mocker):
    enhancer = ContentEnhancer(api_key="")
    extract_batch = mocker.patch.object(enhancer, "extract_batch")
    feed = NewsFeed(MockFeedSource(), enhancer=enhancer, enhance_on_fetch=True)

    feed.fetch_top_headlines()
    extract_batch.assert_not_called()
    enhancer.close()


def test_enhance_failure_leaves_list(mocker):
    enhancer = ContentEnhancer(api_key="k")
    mocker.patch.object(enhancer, "extract_batch", side_effect=RuntimeError("boom"))
    feed = NewsFeed(MockFeedSource(), enhancer=enhancer)
    before = feed.fetch_top_headlines()

    assert feed.enhance_current_articles() == before
    assert feed.is_extracting_content is False
    enhancer.close()
