from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Tuple

from .datamodels import FetchStatus, Notification, ProgressSummary, Topic
from .exceptions import FetchFailed
from .fetcher import Fetcher
from .notifications import TOPIC_COMPLETED, NotificationQueue

logger = logging.getLogger("topics")

TopicList = Tuple[Topic, ...]


class ProgressMap:
    """Per-user record of the last saved topic list, kept in memory only.

    Entries are never removed. Topics are frozen, so storing a tuple built
    from the caller's sequence is enough to keep the entry independent of
    whatever list it was saved from.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, TopicList] = {}

    def get(self, email: str) -> Optional[TopicList]:
        return self._entries.get(email)

    def put(self, email: str, topics: Iterable[Topic]) -> None:
        self._entries[email] = tuple(topics)

    def emails(self) -> List[str]:
        return list(self._entries)

    def __contains__(self, email: object) -> bool:
        return email in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class TopicProgressStore:
    """Owns the active topic list and every user's saved progress.

    The store knows which email the active list belongs to (set by the
    session manager through ``open_session``/``close_session``); every
    mutation made while that email is set is written straight back to the
    progress map.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        progress_map: Optional[ProgressMap] = None,
        notifications: Optional[NotificationQueue] = None,
    ):
        self.fetcher = fetcher
        self.progress_map = progress_map if progress_map is not None else ProgressMap()
        self.notifications = notifications
        self.status = FetchStatus.IDLE
        self.error: Optional[str] = None
        self._topics: TopicList = ()
        self._email: Optional[str] = None
        # Latest fetch issued and the email it was issued for.
        self._fetch_seq = 0
        self._fetch_email: Optional[str] = None

    # --- Read surface ---
    @property
    def topics(self) -> TopicList:
        return self._topics

    @property
    def email(self) -> Optional[str]:
        return self._email

    def is_fetching_for_current(self) -> bool:
        """True while the latest fetch is loading for the currently bound email."""
        return self.status is FetchStatus.LOADING and self._fetch_email == self._email

    def get_topic(self, topic_id: int) -> Optional[Topic]:
        for topic in self._topics:
            if topic.id == topic_id:
                return topic
        return None

    def summary(self) -> ProgressSummary:
        total = len(self._topics)
        completed = sum(1 for t in self._topics if t.completed)
        percent = round(completed / total * 100) if total else 0
        return ProgressSummary(
            completed=completed,
            remaining=total - completed,
            total=total,
            percent=percent,
        )

    # --- Saved progress ---
    def restore(self, email: str) -> Optional[TopicList]:
        return self.progress_map.get(email)

    def save(self, email: str, topics: Iterable[Topic]) -> None:
        self.progress_map.put(email, topics)
        logger.debug("Saved progress for %s", email)

    def open_session(self, email: str) -> None:
        """Bind the active list to ``email`` and load its saved topics, if any."""
        self._email = email
        saved = self.restore(email)
        if saved is not None:
            self._topics = saved
            logger.info("Restored %d topics for %s", len(saved), email)

    def close_session(self) -> None:
        """Save the active list for the bound email, then start over empty."""
        if self._email is not None:
            self.save(self._email, self._topics)
        self._email = None
        self._topics = ()

    def _persist(self) -> None:
        if self._email is not None:
            self.save(self._email, self._topics)

    # --- Fetch ---
    def merge(self, fetched: Iterable[Topic]) -> TopicList:
        """Carry saved completion flags over onto freshly fetched topics."""
        fetched = tuple(fetched)
        saved = self.restore(self._email) if self._email is not None else None
        if saved is None:
            return fetched
        flags = {t.id: t.completed for t in saved}
        return tuple(replace(t, completed=flags.get(t.id, False)) for t in fetched)

    async def fetch_topics(self) -> Optional[TopicList]:
        """Fetch topics and merge them into the active list.

        Returns the new active list, or None when the fetch failed or its
        result was discarded. Callers should not start a fetch while another
        one is loading for the same email (see ``is_fetching_for_current``).
        """
        issued_for = self._email
        self._fetch_seq += 1
        seq = self._fetch_seq
        self._fetch_email = issued_for
        self.status = FetchStatus.LOADING
        self.error = None
        try:
            fetched = await self.fetcher.fetch()
        except FetchFailed as e:
            if self._email != issued_for:
                self._discard(issued_for, seq)
                return None
            self.status = FetchStatus.FAILED
            self.error = e.message
            logger.warning("Topic fetch failed: %s", e.reason)
            return None

        # The session may have changed while the request was in flight.
        if self._email != issued_for:
            self._discard(issued_for, seq)
            return None

        self.status = FetchStatus.SUCCEEDED
        self._topics = self.merge(fetched)
        self._persist()
        logger.info("Loaded %d topics for %s", len(self._topics), self._email or "anonymous")
        return self._topics

    def _discard(self, issued_for: Optional[str], seq: int) -> None:
        logger.info(
            "Discarding topic fetch issued for %s; active session is now %s",
            issued_for or "anonymous",
            self._email or "anonymous",
        )
        # A newer fetch owns the status until it resolves.
        if seq == self._fetch_seq:
            self.status = FetchStatus.IDLE

    # --- Mutations ---
    def mark_completed(self, topic_id: int) -> bool:
        """Mark a topic completed. Returns False if there was nothing to change."""
        topic = self.get_topic(topic_id)
        if topic is None or topic.completed:
            return False

        self._topics = tuple(
            replace(t, completed=True) if t.id == topic_id else t for t in self._topics
        )
        self._persist()
        logger.info("Topic %d completed by %s", topic_id, self._email or "anonymous")
        if self.notifications is not None:
            self.notifications.push(
                Notification(
                    kind=TOPIC_COMPLETED,
                    title="Topic Completed!",
                    message=f'You finished "{topic.title}". Keep going!',
                    data={"id": topic.id, "title": topic.title},
                )
            )
        return True

    def reset_progress(self) -> None:
        self._topics = tuple(replace(t, completed=False) for t in self._topics)
        self._persist()
        logger.info("Progress reset for %s", self._email or "anonymous")
