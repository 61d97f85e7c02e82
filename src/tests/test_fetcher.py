from __future__ import annotations

import asyncio
from unittest.mock import MagicMock, patch

import pytest
import requests

from topics_tui.datamodels import RawTopic
from topics_tui.exceptions import FetchFailed, SourceError
from topics_tui.fetcher import Fetcher, to_topics
from topics_tui.source_manager import get_source
from topics_tui.sources.placeholder import PlaceholderSource
from topics_tui.sources.rss import RSSSource


@pytest.fixture
def placeholder_source():
    return PlaceholderSource({"limit": 5})


def make_response(payload):
    resp = MagicMock()
    resp.json.return_value = payload
    resp.raise_for_status.return_value = None
    return resp


def test_to_topics_ignores_source_ids():
    topics = to_topics([RawTopic("b", "second"), RawTopic("a", "first")])
    assert [(t.id, t.title, t.content) for t in topics] == [
        (1, "b", "second"),
        (2, "a", "first"),
    ]
    assert not any(t.completed for t in topics)


def test_placeholder_list_topics(placeholder_source):
    posts = [{"id": 40 + i, "userId": 1, "title": f"Post {i}", "body": f"Body {i}"} for i in range(5)]
    with patch.object(placeholder_source.session, "get") as mock_get:
        mock_get.return_value = make_response(posts)
        topics = placeholder_source.list_topics()
        _, kwargs = mock_get.call_args
        assert kwargs["params"] == {"_limit": 5}
    assert len(topics) == 5
    assert topics[0] == RawTopic(title="Post 0", body="Body 0")


def test_placeholder_rejects_bad_payload(placeholder_source):
    with patch.object(placeholder_source.session, "get") as mock_get:
        mock_get.return_value = make_response({"error": "nope"})
        with pytest.raises(SourceError):
            placeholder_source.list_topics()

        mock_get.return_value = make_response([{"title": "no body"}])
        with pytest.raises(SourceError):
            placeholder_source.list_topics()


def test_fetcher_wraps_http_errors(placeholder_source):
    with patch.object(placeholder_source.session, "get") as mock_get:
        mock_get.side_effect = requests.ConnectionError("connection refused")
        with pytest.raises(FetchFailed) as exc_info:
            asyncio.run(Fetcher(placeholder_source).fetch())
    assert exc_info.value.reason == "connection refused"


def test_fetcher_returns_topics():
    source = MagicMock()
    source.list_topics.return_value = [RawTopic("x", "y")]
    topics = Fetcher(source).get_topics()
    assert topics[0].id == 1


def test_get_source():
    assert isinstance(get_source({}), PlaceholderSource)
    rss = get_source({"source": "rss", "sources": {"rss": {"url": "http://feed.com", "limit": 3}}})
    assert isinstance(rss, RSSSource)
    assert rss.limit == 3
    with pytest.raises(ValueError):
        get_source({"source": "gopher"})
