"""Textual application entry point for cypherpad."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Callable, Sequence

from neo4j.exceptions import DriverError, Neo4jError
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.widgets import Footer, Header

from .commands import run_current_section
from .config import CONFIG_FILE, AppConfig, load_config, save_config
from .connections import ConnectionBackendError, Neo4jConnectionBackend
from .providers import DatabaseSelectProvider, RunQueryProvider
from .session import SessionManager, SessionState
from .widgets import DatabasePicker, QueryPad, ResultView, StatusBar

LOG = logging.getLogger(__name__)

QUERY_ERRORS = (Neo4jError, DriverError, ConnectionBackendError)


def _load_app_config(path: Path | None = None) -> AppConfig:
    """Load configuration with a small wrapper for future overrides."""

    return load_config(path)


class CypherPadApp(App[None]):
    """Edit a query file and run `####`-delimited sections against Neo4j."""

    TITLE = "cypherpad"
    COMMANDS = App.COMMANDS | {RunQueryProvider, DatabaseSelectProvider}
    CSS = """
    Screen {
        layout: vertical;
    }
    #main-column {
        layout: vertical;
        padding: 0 1;
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("ctrl+r", "run_query", "Run query", priority=True),
        Binding("ctrl+b", "select_database", "Select database", priority=True),
        Binding("ctrl+s", "save", "Save", priority=True),
        ("ctrl+p", "command_palette", "Command Palette"),
    ]

    def __init__(
        self,
        path: Path | None = None,
        *,
        config: AppConfig | None = None,
        config_path: Path | None = None,
        session_manager: SessionManager | None = None,
    ) -> None:
        super().__init__()
        self._path = path
        self._config_path = config_path
        self._config = config or _load_app_config(config_path)
        self._session_manager = session_manager or SessionManager(
            self._config.profiles(),
            picker=self._pick_profile,
            warn=self._warn,
            backend=Neo4jConnectionBackend(self._config.driver.as_kwargs()),
        )
        self._session_unsubscribe: Callable[[], None] | None = None
        self._query_pad: QueryPad | None = None
        self._last_result: str | None = None
        self._install_session_listener()

    def compose(self) -> ComposeResult:
        """Compose the root layout."""

        yield Header(show_clock=True)
        self._query_pad = QueryPad(self._path)
        yield Container(self._query_pad, id="main-column")
        yield StatusBar(self._session_manager)
        yield Footer()

    def on_mount(self) -> None:
        self.theme = _textual_theme(self._config.theme)

    @property
    def session_manager(self) -> SessionManager:
        """Expose the session manager for tests and command providers."""

        return self._session_manager

    @property
    def config(self) -> AppConfig:
        return self._config

    @property
    def last_result(self) -> str | None:
        """Most recent serialized result shown to the user."""

        return self._last_result

    def action_run_query(self) -> None:
        self.run_worker(self._run_query(), group="session", exit_on_error=False)

    def action_select_database(self) -> None:
        self.run_worker(self._select_database(), group="session", exit_on_error=False)

    def action_save(self) -> None:
        if self._query_pad is None:
            return
        saved = self._query_pad.save()
        if saved is not None:
            self.notify(f"Saved {saved.name}", severity="information")

    def switch_profile(self, name: str) -> None:
        """Activate the requested profile without prompting."""

        self.run_worker(self._connect(name), group="session", exit_on_error=False)

    async def _run_query(self) -> None:
        if self._query_pad is None:
            return
        try:
            payload = await run_current_section(
                self._query_pad.editor_document(),
                self._session_manager,
                suffix=self._config.query_suffix,
            )
        except QUERY_ERRORS as exc:
            self.notify(f"Query failed: {exc}", severity="error")
            return
        if payload is None:
            return
        self._last_result = payload
        self.push_screen(ResultView(payload))

    async def _select_database(self) -> None:
        try:
            await self._session_manager.select_database()
        except QUERY_ERRORS as exc:
            self.notify(str(exc), severity="error")

    async def _connect(self, name: str) -> None:
        try:
            await self._session_manager.connect(name)
        except (ValueError, *QUERY_ERRORS) as exc:
            self.notify(str(exc), severity="error")

    async def _pick_profile(self, names: Sequence[str]) -> str | None:
        picker = DatabasePicker(names, highlighted=self._config.active_profile)
        return await self.push_screen_wait(picker)

    def _warn(self, message: str) -> None:
        self.notify(message, severity="warning")

    async def _shutdown(self) -> None:
        if self._session_unsubscribe:
            self._session_unsubscribe()
            self._session_unsubscribe = None
        await self._session_manager.close()
        await super()._shutdown()

    def _install_session_listener(self) -> None:
        if self._session_unsubscribe:
            self._session_unsubscribe()
        self._session_unsubscribe = self._session_manager.subscribe(self._handle_session_state)

    def _handle_session_state(self, state: SessionState) -> None:
        if not state.connected or state.profile is None:
            return
        if state.profile.name == self._config.active_profile:
            return
        self._config = self._config.with_active_profile(state.profile.name)
        try:
            save_config(self._config, self._config_path)
        except OSError:
            LOG.exception("Failed to persist active profile", extra={"profile": state.profile.name})


def _textual_theme(name: str) -> str:
    return {"dark": "textual-dark", "light": "textual-light"}.get(name, name)


def configure_logging(config: AppConfig) -> None:
    """Route logs to a file; the terminal belongs to the UI."""

    if not config.log_file:
        return
    logging.basicConfig(
        filename=config.log_file,
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="cypherpad", description="Run Cypher sections against Neo4j.")
    parser.add_argument("path", nargs="?", type=Path, help="Query document to open (e.g. queries.cypher)")
    parser.add_argument("--config", type=Path, default=None, help=f"Config file (default: {CONFIG_FILE})")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    """Invoke the Textual application."""

    args = parse_args(argv)
    config = _load_app_config(args.config)
    configure_logging(config)
    CypherPadApp(args.path, config=config, config_path=args.config).run()


if __name__ == "__main__":
    main()
