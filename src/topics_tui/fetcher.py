from __future__ import annotations

import asyncio
import logging
from typing import Iterable, List

from .datamodels import RawTopic, Topic
from .exceptions import FetchFailed
from .sources.base import TopicSource

logger = logging.getLogger("topics")


def to_topics(raw_topics: Iterable[RawTopic]) -> List[Topic]:
    """Convert raw source records into fresh, not-completed topics.

    Ids are the 1-based position in the result, not whatever id the source
    uses. Merging saved progress relies on the source returning the same
    shape on every call; a reordered or resized list shifts the ids.
    """
    return [
        Topic(id=index, title=raw.title, content=raw.body, completed=False)
        for index, raw in enumerate(raw_topics, start=1)
    ]


class Fetcher:
    def __init__(self, source: TopicSource):
        self.source = source

    def get_topics(self) -> List[Topic]:
        """Blocking fetch; any source failure is raised as FetchFailed."""
        try:
            raw_topics = self.source.list_topics()
        except Exception as e:
            logger.error("Topic source %s failed: %s", type(self.source).__name__, e)
            raise FetchFailed(str(e) or type(e).__name__) from e
        topics = to_topics(raw_topics)
        logger.debug("Fetched %d topics", len(topics))
        return topics

    async def fetch(self) -> List[Topic]:
        """Run the blocking fetch in a worker thread."""
        return await asyncio.to_thread(self.get_topics)
