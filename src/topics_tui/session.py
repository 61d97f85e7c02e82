from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from .credentials import CredentialSource
from .datamodels import Notification, Session
from .exceptions import InvalidCredentials, MissingCredentials
from .notifications import WELCOME, NotificationQueue
from .progress import TopicProgressStore

logger = logging.getLogger("topics")


class SessionManager:
    """Tracks who is logged in and hands save/restore off to the store."""

    def __init__(
        self,
        credentials: CredentialSource,
        store: TopicProgressStore,
        notifications: Optional[NotificationQueue] = None,
    ):
        self.credentials = credentials
        self.store = store
        self.notifications = notifications
        self._session: Optional[Session] = None

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None and self._session.authenticated

    @property
    def email(self) -> Optional[str]:
        return self._session.email if self._session else None

    def authenticate(self, email: str, password: str) -> Session:
        """Log in, restoring the user's saved topics.

        Raises InvalidCredentials (or MissingCredentials for empty fields)
        without touching the current session.
        """
        if not email or not password:
            raise MissingCredentials()
        record = self.credentials.lookup(email, password)
        if record is None:
            logger.info("Rejected login for %s", email)
            raise InvalidCredentials()

        if self._session is not None:
            # Save the previous user's progress before switching identity.
            logger.info("Ending session for %s before logging in %s", self._session.email, email)
            self.end_session()

        self._session = Session(email=record.email, name=record.name)
        self.store.open_session(record.email)
        logger.info("Logged in %s", record.email)

        if self.notifications is not None:
            login_time = datetime.now().strftime("%H:%M:%S")
            self.notifications.push(
                Notification(
                    kind=WELCOME,
                    title="Welcome!",
                    message=f"Hello {record.name}! You logged in at {login_time}",
                    data={"name": record.name, "time": login_time},
                )
            )
        return self._session

    def end_session(self) -> None:
        if self._session is None:
            return
        email = self._session.email
        self.store.close_session()
        self._session = None
        logger.info("Logged out %s", email)
