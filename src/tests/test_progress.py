from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

import pytest

from topics_tui.datamodels import FetchStatus, RawTopic, Topic
from topics_tui.fetcher import Fetcher
from topics_tui.notifications import TOPIC_COMPLETED, NotificationQueue
from topics_tui.progress import ProgressMap, TopicProgressStore

TITLES = ["T1", "T2", "T3", "T4", "T5"]


def raw_topics(titles=TITLES):
    return [RawTopic(title=t, body=f"{t} body") for t in titles]


@pytest.fixture
def source():
    src = MagicMock()
    src.list_topics.return_value = raw_topics()
    return src


@pytest.fixture
def notifications():
    return NotificationQueue()


@pytest.fixture
def store(source, notifications):
    return TopicProgressStore(Fetcher(source), ProgressMap(), notifications)


def fetch(store):
    return asyncio.run(store.fetch_topics())


def completed_ids(topics):
    return {t.id for t in topics if t.completed}


def test_fetch_resequences_ids(store):
    topics = fetch(store)
    assert [t.id for t in topics] == [1, 2, 3, 4, 5]
    assert [t.title for t in topics] == TITLES
    assert topics[0].content == "T1 body"
    assert not any(t.completed for t in topics)
    assert store.status is FetchStatus.SUCCEEDED
    assert store.error is None


def test_anonymous_fetch_does_not_save(store):
    fetch(store)
    assert len(store.progress_map) == 0


def test_refetch_keeps_completed_flag(store):
    store.open_session("john@example.com")
    fetch(store)
    assert store.mark_completed(3) is True

    topics = fetch(store)

    assert [t.id for t in topics] == [1, 2, 3, 4, 5]
    assert completed_ids(topics) == {3}
    assert completed_ids(store.progress_map.get("john@example.com")) == {3}


def test_merge_takes_content_from_fresh_fetch(store, source):
    store.open_session("john@example.com")
    fetch(store)
    store.mark_completed(2)

    source.list_topics.return_value = raw_topics(["A", "B", "C", "D", "E", "F"])
    topics = fetch(store)

    assert [t.title for t in topics] == ["A", "B", "C", "D", "E", "F"]
    assert completed_ids(topics) == {2}


def test_fetch_failure_leaves_list_and_map(store, source):
    store.open_session("john@example.com")
    fetch(store)
    store.mark_completed(1)
    before = store.topics
    saved_before = store.progress_map.get("john@example.com")

    source.list_topics.side_effect = ConnectionError("network down")
    assert fetch(store) is None

    assert store.status is FetchStatus.FAILED
    assert "network down" in store.error
    assert store.topics == before
    assert store.progress_map.get("john@example.com") == saved_before


def test_failure_from_idle_then_success(store, source):
    source.list_topics.side_effect = ConnectionError("offline")
    fetch(store)
    assert store.status is FetchStatus.FAILED
    assert store.topics == ()

    source.list_topics.side_effect = None
    fetch(store)
    assert store.status is FetchStatus.SUCCEEDED
    assert store.error is None
    assert len(store.topics) == 5


def test_mark_completed_noops(store, notifications):
    store.open_session("john@example.com")
    fetch(store)
    store.mark_completed(1)
    notifications.drain()
    before = store.topics

    assert store.mark_completed(1) is False
    assert store.mark_completed(99) is False
    assert store.topics == before
    assert len(notifications) == 0


def test_mark_completed_replaces_snapshot(store):
    fetch(store)
    before = store.topics
    store.mark_completed(4)
    assert before[3].completed is False
    assert store.topics[3].completed is True


def test_mark_completed_notifies(store, notifications):
    fetch(store)
    store.mark_completed(2)
    [notification] = notifications.drain()
    assert notification.kind == TOPIC_COMPLETED
    assert notification.data == {"id": 2, "title": "T2"}


def test_reset_is_idempotent(store):
    store.open_session("john@example.com")
    fetch(store)
    store.mark_completed(1)
    store.mark_completed(5)

    store.reset_progress()
    once = store.topics
    store.reset_progress()

    assert store.topics == once
    assert completed_ids(store.topics) == set()
    assert completed_ids(store.progress_map.get("john@example.com")) == set()


def test_save_does_not_alias(store):
    topics = [Topic(1, "a", "b"), Topic(2, "c", "d")]
    store.save("jane@example.com", topics)
    topics.append(Topic(3, "e", "f"))
    assert len(store.restore("jane@example.com")) == 2


def test_restore_unknown_email(store):
    assert store.restore("nobody@example.com") is None


def test_close_session_saves_and_clears(store):
    store.open_session("john@example.com")
    fetch(store)
    store.mark_completed(3)
    store.close_session()

    assert store.topics == ()
    assert store.email is None
    assert completed_ids(store.restore("john@example.com")) == {3}


def test_summary(store):
    assert store.summary().percent == 0
    fetch(store)
    store.mark_completed(1)
    store.mark_completed(2)
    summary = store.summary()
    assert (summary.completed, summary.remaining, summary.total) == (2, 3, 5)
    assert summary.percent == 40


class GatedFetcher:
    """Fetcher whose result is released by the test."""

    def __init__(self, topics):
        self.topics = topics
        self.release = None

    async def fetch(self):
        self.release = asyncio.Event()
        await self.release.wait()
        return self.topics


def test_fetch_discarded_when_session_changes():
    fresh = [Topic(i, f"T{i}", "") for i in range(1, 6)]
    fetcher = GatedFetcher(fresh)
    store = TopicProgressStore(fetcher)
    store.save("jane@example.com", [Topic(1, "old", "", completed=True)])
    store.open_session("john@example.com")

    async def scenario():
        task = asyncio.create_task(store.fetch_topics())
        await asyncio.sleep(0)
        assert store.status is FetchStatus.LOADING
        store.close_session()
        store.open_session("jane@example.com")
        fetcher.release.set()
        return await task

    assert asyncio.run(scenario()) is None
    assert store.status is FetchStatus.IDLE
    assert store.topics == (Topic(1, "old", "", completed=True),)
    assert store.restore("john@example.com") == ()


def test_stale_fetch_does_not_block_or_reset_newer_fetch():
    fresh = [Topic(i, f"T{i}", "") for i in range(1, 6)]
    stale = GatedFetcher(fresh)
    store = TopicProgressStore(stale)
    store.open_session("john@example.com")

    async def scenario():
        old = asyncio.create_task(store.fetch_topics())
        await asyncio.sleep(0)
        assert store.is_fetching_for_current()

        store.close_session()
        store.open_session("jane@example.com")
        assert not store.is_fetching_for_current()

        store.fetcher = GatedFetcher(fresh)
        new = asyncio.create_task(store.fetch_topics())
        await asyncio.sleep(0)
        stale.release.set()
        assert await old is None
        assert store.status is FetchStatus.LOADING

        store.fetcher.release.set()
        return await new

    assert asyncio.run(scenario()) is not None
    assert store.status is FetchStatus.SUCCEEDED
    assert store.email == "jane@example.com"
    assert len(store.topics) == 5
    assert len(store.restore("jane@example.com")) == 5
