"""Status bar widget that mirrors session information."""

from __future__ import annotations

from typing import Callable

from textual.widgets import Static

from cypherpad.session import SessionManager, SessionState


class StatusBar(Static):
    """Compact status strip rendered above Textual's footer."""

    DEFAULT_CSS = """
    StatusBar {
        height: 1;
        padding: 0 1;
        background: $surface-darken-3;
        color: $text;
    }
    """

    def __init__(self, session_manager: SessionManager) -> None:
        super().__init__("", id="status-bar")
        self._session_manager = session_manager
        self._unsubscribe: Callable[[], None] | None = None

    async def on_mount(self) -> None:
        self._unsubscribe = self._session_manager.subscribe(self._handle_session_update)

    def on_unmount(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    def _handle_session_update(self, state: SessionState) -> None:
        self.update(describe_state(state))


def describe_state(state: SessionState) -> str:
    parts = [f"Status: {state.phase.value.capitalize()}"]
    if state.profile is not None:
        parts.append(f"Profile: {state.profile.name}")
        parts.append(f"Database: {state.profile.database or 'default'}")
    if state.connected_at is not None:
        parts.append(f"Since: {state.connected_at.astimezone().strftime('%H:%M:%S')}")
    return " | ".join(parts)


__all__ = ["StatusBar", "describe_state"]
