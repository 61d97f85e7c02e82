from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict


# --- Data models ---
@dataclass(frozen=True)
class Topic:
    id: int
    title: str
    content: str
    completed: bool = False


@dataclass(frozen=True)
class RawTopic:
    """A topic record as returned by a source, before it gets a local id."""
    title: str
    body: str


@dataclass(frozen=True)
class Session:
    email: str
    name: str
    authenticated: bool = True


@dataclass(frozen=True)
class Credential:
    email: str
    password: str
    name: str


class FetchStatus(Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class ProgressSummary:
    completed: int
    remaining: int
    total: int
    percent: int


@dataclass
class Notification:
    kind: str
    title: str
    message: str
    data: Dict[str, Any] = field(default_factory=dict)
