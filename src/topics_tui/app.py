from __future__ import annotations

import logging
from typing import Any, Optional

from textual.app import App, ComposeResult
from textual.widgets import Header
from textual.worker import Worker, WorkerState

from .config import DEFAULT_CONFIG
from .credentials import CredentialSource
from .fetcher import Fetcher
from .messages import TopicsUpdated
from .notifications import NotificationQueue
from .progress import TopicProgressStore
from .screens import LoginScreen, TopicDetailScreen, TopicsScreen
from .session import SessionManager
from .source_manager import get_source

logger = logging.getLogger("topics")


class TopicsApp(App):
    TITLE = "Topics"
    SUB_TITLE = "Learn one topic at a time"

    CSS = """
    #login-form { width: 60; height: auto; margin: 2 4; }
    .login-title, .dialog-title, .topic-detail-title { text-style: bold; margin-bottom: 1; }
    .login-hint { color: $text-muted; margin-top: 1; }
    #progress-header { padding: 0 1; height: 1; }
    #topics-error { padding: 0 1; }
    TopicListItem { padding: 0 1; }
    TopicListItem.completed { border-left: thick $success; }
    .topic-header { height: 1; }
    .topic-title { width: 1fr; text-style: bold; }
    .topic-badge { width: 3; color: $success; }
    .topic-preview { color: $text-muted; }
    .topic-completed { color: $success; margin-bottom: 1; }
    #topic-scroll { padding: 1 2; }
    #profile { padding: 1 2; }
    #profile-stats, .profile-buttons, .dialog-buttons { height: auto; margin-top: 1; }
    .stat-card { width: 1fr; content-align: center middle; border: round $primary; }
    ConfirmScreen { align: center middle; }
    #confirm-dialog { width: 50; height: auto; border: thick $primary; padding: 1 2; background: $surface; }
    """

    def __init__(
        self,
        theme: Optional[str] = None,
        config: Optional[dict[str, Any]] = None,
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        self._theme_name = theme
        self.config = config or dict(DEFAULT_CONFIG)
        self.notifications = NotificationQueue()
        self.credentials = CredentialSource.from_config(self.config)
        self.store = TopicProgressStore(
            Fetcher(get_source(self.config)), notifications=self.notifications
        )
        self.session_manager = SessionManager(
            self.credentials, self.store, notifications=self.notifications
        )

    def compose(self) -> ComposeResult:
        yield Header()

    def on_mount(self) -> None:
        if self._theme_name:
            if self._theme_name in self.available_themes:
                self.theme = self._theme_name
            else:
                logger.warning("Unknown theme %s, keeping %s", self._theme_name, self.theme)
        self.push_screen(LoginScreen())

    # --- Actions driven by the screens ---
    def login(self, email: str, password: str) -> None:
        self.session_manager.authenticate(email, password)
        self.flush_notifications()
        self.switch_screen(TopicsScreen())
        self.refresh_topics()

    def logout(self) -> None:
        self.session_manager.end_session()
        # Back to the base screen, then show the login form.
        while len(self.screen_stack) > 2:
            self.pop_screen()
        self.switch_screen(LoginScreen())

    def refresh_topics(self) -> None:
        if self.store.is_fetching_for_current():
            logger.debug("Topic fetch already in flight, ignoring refresh")
            return
        self.run_worker(self.store.fetch_topics(), name="topics_loader")
        self.screen.post_message(TopicsUpdated())

    def open_topic(self, topic_id: int) -> None:
        self.store.mark_completed(topic_id)
        self.flush_notifications()
        self.push_screen(TopicDetailScreen(topic_id))

    def flush_notifications(self) -> None:
        for notification in self.notifications.drain():
            self.notify(notification.message, title=notification.title)

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        if getattr(event.worker, "name", None) != "topics_loader":
            return
        if event.state in (WorkerState.PENDING, WorkerState.RUNNING):
            return
        if event.state is WorkerState.ERROR:
            logger.error("Topics worker failed: %s", event.worker.error)
        self.screen.post_message(TopicsUpdated())
