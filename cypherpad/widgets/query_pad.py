"""Editor pane holding the query document."""

from __future__ import annotations

import logging
from pathlib import Path

from textual.app import ComposeResult
from textual.containers import Container
from textual.widgets import Static, TextArea

from cypherpad.commands import EditorDocument
from cypherpad.sections import Position

LOG = logging.getLogger(__name__)


class QueryPad(Container):
    """Multi-line editor for a query file; sections are split by `####` lines."""

    DEFAULT_CSS = """
    QueryPad {
        layout: vertical;
        border: round $primary 40%;
        padding: 0 1;
        height: 1fr;
        background: $surface;
    }

    QueryPad .panel-title {
        text-style: bold;
    }

    QueryPad TextArea {
        height: 1fr;
    }

    QueryPad:focus-within {
        border: round $primary;
    }
    """

    def __init__(self, path: Path | None = None, *, text: str | None = None) -> None:
        super().__init__(id="query-pad")
        self._path = path
        self._initial_text = text if text is not None else _read_text(path)
        self._editor: TextArea | None = None
        self._title: Static | None = None

    @property
    def path(self) -> Path | None:
        return self._path

    def compose(self) -> ComposeResult:
        yield Static(self._title_text(), classes="panel-title", id="query-title")
        yield TextArea.code_editor(self._initial_text, id="query-editor", soft_wrap=False)

    async def on_mount(self) -> None:
        self._editor = self.query_one("#query-editor", TextArea)
        self._title = self.query_one("#query-title", Static)
        self._editor.focus()

    def editor_document(self) -> EditorDocument:
        """Snapshot of the buffer and cursor for the run-query action."""

        editor = self._editor or self.query_one("#query-editor", TextArea)
        row, column = editor.cursor_location
        return EditorDocument(
            path=self._path,
            lines=tuple(editor.document.lines),
            cursor=Position(row, column),
        )

    def save(self) -> Path | None:
        """Write the buffer back to its file; returns the path written."""

        if self._path is None:
            return None
        editor = self._editor or self.query_one("#query-editor", TextArea)
        self._path.write_text(editor.text)
        LOG.info("Saved query document", extra={"path": str(self._path)})
        return self._path

    def _title_text(self) -> str:
        return str(self._path) if self._path else "Untitled (not a query document)"


def _read_text(path: Path | None) -> str:
    if path is None or not path.exists():
        return ""
    return path.read_text()


__all__ = ["QueryPad"]
