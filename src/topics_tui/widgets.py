from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import ListItem, Static
from textual.reactive import reactive
from rich.text import Text

from .datamodels import FetchStatus, ProgressSummary, Topic

PREVIEW_LENGTH = 80


# --- UI Widgets ---
class TopicListItem(ListItem):
    def __init__(self, topic: Topic):
        super().__init__()
        self.topic = topic
        if topic.completed:
            self.add_class("completed")

    def compose(self) -> ComposeResult:
        preview = self.topic.content.replace("\n", " ")
        if len(preview) > PREVIEW_LENGTH:
            preview = preview[:PREVIEW_LENGTH].rstrip() + "..."
        with Vertical(classes="topic-container"):
            with Horizontal(classes="topic-header"):
                yield Static(self.topic.title, classes="topic-title")
                yield Static("✓" if self.topic.completed else "", classes="topic-badge")
            yield Static(preview, classes="topic-preview")


class ProgressHeader(Static):
    def show(self, name: str, summary: ProgressSummary) -> None:
        self.update(
            f"Welcome, [b]{name}[/b]  "
            f"Progress: {summary.completed}/{summary.total} topics completed"
        )


class StatusBar(Static):
    """One-line footer: fetch state on the left, key hints on the right."""

    STATUS_TEXT = {
        FetchStatus.IDLE: "",
        FetchStatus.LOADING: "Loading topics...",
        FetchStatus.SUCCEEDED: "Topics up to date",
        FetchStatus.FAILED: "[b red]Fetch failed[/]",
    }

    fetch_status = reactive(FetchStatus.IDLE)
    keybinding_hint = reactive("")

    def on_mount(self) -> None:
        self.update(self.status_line())

    def set_keybindings(self, hint: str) -> None:
        self.keybinding_hint = hint

    def status_line(self) -> str:
        parts = [self.STATUS_TEXT[self.fetch_status], self.keybinding_hint]
        return " | ".join(p for p in parts if p)

    def watch_fetch_status(self, fetch_status: FetchStatus) -> None:
        self.update(self.status_line())

    def watch_keybinding_hint(self, keybinding_hint: str) -> None:
        self.update(self.status_line())


class ErrorMessage(Static):
    def __init__(self, message: str, **kwargs):
        super().__init__(Text(message, style="bold red"), **kwargs)
