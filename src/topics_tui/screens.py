from __future__ import annotations

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen, Screen
from textual.widgets import (
    Button,
    Footer,
    Header,
    Input,
    Label,
    ListView,
    LoadingIndicator,
    Static,
)

from .config import UI_DEFAULTS
from .datamodels import FetchStatus
from .exceptions import InvalidCredentials
from .messages import TopicsUpdated
from .widgets import ErrorMessage, ProgressHeader, StatusBar, TopicListItem


class ConfirmScreen(ModalScreen[bool]):
    """Yes/no dialog; dismisses with True when confirmed."""

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    def __init__(self, title: str, question: str, confirm_label: str):
        super().__init__()
        self.dialog_title = title
        self.question = question
        self.confirm_label = confirm_label

    def compose(self) -> ComposeResult:
        with Vertical(id="confirm-dialog"):
            yield Label(self.dialog_title, classes="dialog-title")
            yield Static(self.question)
            with Horizontal(classes="dialog-buttons"):
                yield Button("Cancel", id="cancel")
                yield Button(self.confirm_label, id="confirm", variant="error")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "confirm")

    def action_cancel(self) -> None:
        self.dismiss(False)


class LoginScreen(Screen):
    BINDINGS = [Binding("ctrl+q", "app.quit", "Quit")]

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="login-form"):
            yield Label("Learning App", classes="login-title")
            yield Input(placeholder="Email", id="login-email")
            yield Input(placeholder="Password", password=True, id="login-password")
            yield Button("Login", id="login-button", variant="primary")
            yield Label("", id="login-error")
            yield Static(self._demo_hint(), classes="login-hint")
        yield Footer()

    def _demo_hint(self) -> str:
        lines = ["Demo accounts:"]
        for record in self.app.credentials.records:
            lines.append(f"{record.email} / {record.password}")
        return "\n".join(lines)

    def on_mount(self) -> None:
        self.title = "Login"
        self.query_one("#login-email", Input).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "login-button":
            self._submit()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "login-email":
            self.query_one("#login-password", Input).focus()
        else:
            self._submit()

    def _submit(self) -> None:
        email = self.query_one("#login-email", Input).value
        password = self.query_one("#login-password", Input).value
        try:
            self.app.login(email, password)
        except InvalidCredentials as e:
            self.query_one("#login-error", Label).update(f"[b red]{e.message}[/]")


class TopicsScreen(Screen):
    BINDINGS = [
        Binding("r", "refresh", "Refresh"),
        Binding("p", "show_profile", "Profile"),
        Binding("l", "logout", "Logout"),
        Binding("ctrl+q", "app.quit", "Quit"),
    ]

    def compose(self) -> ComposeResult:
        yield Header()
        yield ProgressHeader(id="progress-header")
        yield LoadingIndicator(id="topics-loading")
        yield ErrorMessage("", id="topics-error")
        yield ListView(id="topics-list")
        yield StatusBar()

    def on_mount(self) -> None:
        self.title = "Topics"
        self.query_one(StatusBar).set_keybindings(
            self.app.config.get("ui", {})
            .get("statusbar_keybindings", UI_DEFAULTS["statusbar_keybindings"])
            .format(color="$accent")
        )
        self.refresh_view()
        self.query_one("#topics-list", ListView).focus()

    def on_screen_resume(self) -> None:
        if self.is_mounted:
            self.refresh_view()

    def on_topics_updated(self, message: TopicsUpdated) -> None:
        self.refresh_view()

    def refresh_view(self) -> None:
        store = self.app.store
        session = self.app.session_manager.session
        topics = store.topics
        loading = store.status is FetchStatus.LOADING

        if session is not None:
            self.query_one(ProgressHeader).show(session.name, store.summary())

        self.query_one("#topics-loading", LoadingIndicator).display = loading and not topics
        self.query_one(StatusBar).fetch_status = store.status

        error = self.query_one("#topics-error", ErrorMessage)
        if store.status is FetchStatus.FAILED:
            error.update(f"[b red]{store.error}[/]  press [b]r[/] to retry")
            error.display = True
        else:
            error.display = False

        topics_list = self.query_one("#topics-list", ListView)
        index = topics_list.index
        topics_list.clear()
        for topic in topics:
            topics_list.append(TopicListItem(topic))
        if topics and index is not None:
            topics_list.index = min(index, len(topics) - 1)
        topics_list.display = bool(topics)

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        if isinstance(event.item, TopicListItem):
            self.app.open_topic(event.item.topic.id)

    def action_refresh(self) -> None:
        self.app.refresh_topics()

    def action_show_profile(self) -> None:
        self.app.push_screen(ProfileScreen())

    def action_logout(self) -> None:
        self.app.logout()


class TopicDetailScreen(Screen):
    BINDINGS = [
        Binding("escape,q,b,left", "app.pop_screen", "Back to Topics"),
        Binding("down", "scroll_down", "Scroll Down"),
        Binding("up", "scroll_up", "Scroll Up"),
    ]

    def __init__(self, topic_id: int):
        super().__init__()
        self.topic_id = topic_id

    def compose(self) -> ComposeResult:
        yield Header()
        topic = self.app.store.get_topic(self.topic_id)
        with VerticalScroll(id="topic-scroll"):
            if topic is None:
                yield ErrorMessage("Topic not found!")
            else:
                yield Label(topic.title, classes="topic-detail-title")
                if topic.completed:
                    yield Static("✓ You've completed this topic", classes="topic-completed")
                yield Static(topic.content, classes="topic-body")
        yield Footer()

    def on_mount(self) -> None:
        topic = self.app.store.get_topic(self.topic_id)
        self.title = topic.title if topic else "Topic"
        self.query_one("#topic-scroll").focus()

    def action_scroll_down(self) -> None:
        self.query_one("#topic-scroll").scroll_down()

    def action_scroll_up(self) -> None:
        self.query_one("#topic-scroll").scroll_up()


class ProfileScreen(Screen):
    BINDINGS = [
        Binding("escape,q", "app.pop_screen", "Back"),
    ]

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="profile"):
            yield Static(id="profile-avatar")
            yield Static(id="profile-identity")
            with Horizontal(id="profile-stats"):
                yield Static(id="stat-completed", classes="stat-card")
                yield Static(id="stat-remaining", classes="stat-card")
                yield Static(id="stat-percent", classes="stat-card")
            with Horizontal(classes="profile-buttons"):
                yield Button("Refresh Topics", id="profile-refresh")
                yield Button("Reset Progress", id="profile-reset", variant="warning")
                yield Button("Logout", id="profile-logout", variant="error")
        yield Footer()

    def on_mount(self) -> None:
        self.title = "Profile"
        self.refresh_view()

    def on_screen_resume(self) -> None:
        if self.is_mounted:
            self.refresh_view()

    def on_topics_updated(self, message: TopicsUpdated) -> None:
        self.refresh_view()

    def refresh_view(self) -> None:
        session = self.app.session_manager.session
        name = session.name if session else ""
        email = session.email if session else ""
        summary = self.app.store.summary()

        self.query_one("#profile-avatar", Static).update(
            f"[b]{name[:1].upper() or '?'}[/b]"
        )
        self.query_one("#profile-identity", Static).update(f"[b]{name}[/b]\n{email}")
        self.query_one("#stat-completed", Static).update(f"[b]{summary.completed}[/b]\nCompleted")
        self.query_one("#stat-remaining", Static).update(f"[b]{summary.remaining}[/b]\nRemaining")
        self.query_one("#stat-percent", Static).update(f"[b]{summary.percent}%[/b]\nProgress")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "profile-refresh":
            self.app.refresh_topics()
            self.app.notify("Fetching latest topics...", title="Refreshing")
        elif event.button.id == "profile-reset":
            self.app.push_screen(
                ConfirmScreen("Reset Progress", "Reset all your completed topics?", "Reset"),
                self._on_reset_confirmed,
            )
        elif event.button.id == "profile-logout":
            self.app.push_screen(
                ConfirmScreen("Logout", "Are you sure you want to logout?", "Logout"),
                self._on_logout_confirmed,
            )

    def _on_reset_confirmed(self, confirmed: bool | None) -> None:
        if confirmed:
            self.app.store.reset_progress()
            self.refresh_view()

    def _on_logout_confirmed(self, confirmed: bool | None) -> None:
        if confirmed:
            self.app.logout()
