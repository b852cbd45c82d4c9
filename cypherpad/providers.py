"""Command palette providers for core app features."""

from __future__ import annotations

from textual.command import DiscoveryHit, Hit, Hits, Provider
from textual.types import IgnoreReturnCallbackType

from .session import SessionManager


class DatabaseSelectProvider(Provider):
    """Expose database profiles to the command palette."""

    _PROMPT_LABEL = "Select database"

    async def search(self, query: str) -> Hits:
        manager = self._session_manager
        if manager is None:
            return
        matcher = self.matcher(query)
        score = matcher.match(self._PROMPT_LABEL)
        if score > 0:
            yield Hit(
                score=score,
                match_display=matcher.highlight(self._PROMPT_LABEL),
                command=self._build_prompt_callback(),
                help="Choose the database queries run against.",
            )
        for profile in manager.profiles:
            label = f"{self._PROMPT_LABEL}: {profile.name}"
            match = matcher.match(label)
            if match > 0:
                yield Hit(
                    score=match,
                    match_display=matcher.highlight(label),
                    command=self._build_switch_callback(profile.name),
                    help=profile.url,
                )

    async def discover(self) -> Hits:
        manager = self._session_manager
        if manager is None:
            return
        yield DiscoveryHit(
            display=self._PROMPT_LABEL,
            command=self._build_prompt_callback(),
            help="Choose the database queries run against.",
        )
        for profile in manager.profiles:
            yield DiscoveryHit(
                display=f"{self._PROMPT_LABEL}: {profile.name}",
                command=self._build_switch_callback(profile.name),
                help=profile.url,
            )

    @property
    def _session_manager(self) -> SessionManager | None:
        manager = getattr(self.app, "session_manager", None)
        if isinstance(manager, SessionManager):
            return manager
        return None

    def _build_prompt_callback(self) -> IgnoreReturnCallbackType:
        async def _run() -> None:
            action = getattr(self.app, "action_select_database", None)
            if action is None:
                return
            action()

        return _run

    def _build_switch_callback(self, name: str) -> IgnoreReturnCallbackType:
        async def _run() -> None:
            switcher = getattr(self.app, "switch_profile", None)
            if switcher is None:
                return
            switcher(name)

        return _run


class RunQueryProvider(Provider):
    """Expose the run-query action."""

    _LABEL = "Run query"

    async def search(self, query: str) -> Hits:
        matcher = self.matcher(query)
        score = matcher.match(self._LABEL)
        if score > 0:
            yield Hit(
                score=score,
                match_display=matcher.highlight(self._LABEL),
                command=self._build_callback(),
                help="Run the section under the cursor.",
            )

    async def discover(self) -> Hits:
        yield DiscoveryHit(
            display=self._LABEL,
            command=self._build_callback(),
            help="Run the section under the cursor.",
        )

    def _build_callback(self) -> IgnoreReturnCallbackType:
        async def _run() -> None:
            action = getattr(self.app, "action_run_query", None)
            if action is None:
                return
            action()

        return _run


__all__ = ["DatabaseSelectProvider", "RunQueryProvider"]
