from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from ..config import TOPICS_LIMIT
from ..datamodels import RawTopic


class TopicSource(ABC):
    """Abstract base class for a remote topic source."""

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.limit = int(self.config.get("limit", TOPICS_LIMIT))

    @abstractmethod
    def list_topics(self) -> List[RawTopic]:
        """Return the ordered list of raw topics.

        Implementations may raise any exception on network or parse failure;
        the fetcher turns those into ``FetchFailed``.
        """
        pass
