"""Read-only screen presenting a serialized query result."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Static, TextArea


class ResultView(ModalScreen[None]):
    """Shows JSON result text; the buffer cannot be edited."""

    DEFAULT_CSS = """
    ResultView {
        align: center middle;
    }

    ResultView > Vertical {
        width: 90%;
        height: 90%;
        border: heavy $primary;
        background: $surface;
    }

    ResultView .result-title {
        text-style: bold;
        padding: 0 1;
    }

    ResultView TextArea {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("escape", "close", "Close"),
        Binding("q", "close", "Close", show=False),
    ]

    def __init__(self, payload: str, *, title: str = "Query result") -> None:
        super().__init__(id="result-view")
        self._payload = payload
        self._title = title

    @property
    def payload(self) -> str:
        return self._payload

    def compose(self) -> ComposeResult:
        yield Vertical(
            Static(self._title, classes="result-title"),
            TextArea(self._payload, language="json", read_only=True, id="result-text"),
        )

    def on_mount(self) -> None:
        self.query_one("#result-text", TextArea).focus()

    def action_close(self) -> None:
        self.dismiss(None)


__all__ = ["ResultView"]
