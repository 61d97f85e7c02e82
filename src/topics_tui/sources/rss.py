from __future__ import annotations

import logging
from typing import Any, Dict, List

import feedparser
from bs4 import BeautifulSoup

from ..datamodels import RawTopic
from ..exceptions import SourceError
from .base import TopicSource

logger = logging.getLogger("topics")


class RSSSource(TopicSource):
    """Topics taken from the first entries of an RSS or Atom feed."""

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)
        self.url = self.config.get("url", "")

    def list_topics(self) -> List[RawTopic]:
        if not self.url:
            raise SourceError("No feed URL configured for the rss source")
        feed = feedparser.parse(self.url)
        if getattr(feed, "bozo", False) and not feed.entries:
            raise SourceError(f"Could not parse feed {self.url}: {feed.get('bozo_exception')}")

        topics = []
        for entry in feed.entries[: self.limit]:
            if "content" in entry:
                body_html = "\n".join(c.get("value", "") for c in entry["content"])
            else:
                body_html = entry.get("summary", "")
            body = BeautifulSoup(body_html, "lxml").get_text(" ", strip=True)
            topics.append(RawTopic(title=entry.get("title", ""), body=body))
        logger.debug("Parsed %d topics from feed %s", len(topics), self.url)
        return topics
