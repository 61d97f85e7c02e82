"""Exceptions raised by the session and topic layers."""

from __future__ import annotations


class TopicsError(Exception):
    """Base exception for all topics-tui errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class InvalidCredentials(TopicsError):
    """No credential record matches the given email and password."""

    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(message)


class MissingCredentials(InvalidCredentials):
    """Email or password was left empty."""

    def __init__(self, message: str = "Please fill all fields") -> None:
        super().__init__(message)


class SourceError(TopicsError):
    """A topic source returned something that cannot be turned into topics."""


class FetchFailed(TopicsError):
    """Retrieving the topic list failed."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Failed to fetch topics: {reason}")
