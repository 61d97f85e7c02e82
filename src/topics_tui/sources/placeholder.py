from __future__ import annotations

import logging
from typing import Any, Dict, List

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..config import (
    HTTP_TIMEOUT,
    REQUEST_HEADERS,
    RETRY_BACKOFF,
    RETRY_STATUSES,
    RETRY_TOTAL,
    TOPICS_URL,
)
from ..datamodels import RawTopic
from ..exceptions import SourceError
from .base import TopicSource

logger = logging.getLogger("topics")


class PlaceholderSource(TopicSource):
    """Topics backed by the JSONPlaceholder posts endpoint."""

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)
        self.url = self.config.get("url") or TOPICS_URL
        self.timeout = self.config.get("timeout", HTTP_TIMEOUT)
        self.session = self._create_session()

    def _create_session(self) -> requests.Session:
        s = requests.Session()
        s.headers.update(REQUEST_HEADERS)
        retries = Retry(
            total=RETRY_TOTAL,
            backoff_factor=RETRY_BACKOFF,
            status_forcelist=RETRY_STATUSES,
        )
        adapter = HTTPAdapter(max_retries=retries)
        s.mount("https://", adapter)
        s.mount("http://", adapter)
        return s

    def list_topics(self) -> List[RawTopic]:
        logger.debug("Fetching topics from %s (limit %d)", self.url, self.limit)
        resp = self.session.get(
            self.url, params={"_limit": self.limit}, timeout=self.timeout
        )
        resp.raise_for_status()
        try:
            data = resp.json()
        except ValueError as e:
            raise SourceError(f"Invalid JSON from {self.url}: {e}") from e
        return _parse_posts(data)[: self.limit]


def _parse_posts(data: Any) -> List[RawTopic]:
    if not isinstance(data, list):
        raise SourceError(f"Expected a list of posts, got {type(data).__name__}")
    topics: List[RawTopic] = []
    for index, post in enumerate(data):
        if not isinstance(post, dict) or "title" not in post or "body" not in post:
            raise SourceError(f"Post at position {index} has no title/body")
        topics.append(RawTopic(title=str(post["title"]), body=str(post["body"])))
    return topics
