"""Modal list used to choose a database profile."""

from __future__ import annotations

from typing import Sequence

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import OptionList, Static


class DatabasePicker(ModalScreen[str | None]):
    """Single-select list of profile names; escape cancels with None."""

    DEFAULT_CSS = """
    DatabasePicker {
        align: center middle;
    }

    DatabasePicker > Vertical {
        width: 48;
        height: auto;
        max-height: 20;
        border: heavy $primary;
        background: $surface;
        padding: 1;
    }

    DatabasePicker .picker-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    def __init__(self, names: Sequence[str], *, highlighted: str | None = None) -> None:
        super().__init__(id="database-picker")
        self._names = tuple(names)
        self._highlighted = highlighted

    def compose(self) -> ComposeResult:
        yield Vertical(
            Static("Select Neo4j database", classes="picker-title"),
            OptionList(*self._names, id="profile-options"),
        )

    def on_mount(self) -> None:
        options = self.query_one("#profile-options", OptionList)
        if self._highlighted in self._names:
            options.highlighted = self._names.index(self._highlighted)
        elif self._names:
            options.highlighted = 0
        options.focus()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        self.dismiss(self._names[event.option_index])

    def action_cancel(self) -> None:
        self.dismiss(None)


__all__ = ["DatabasePicker"]
