"""Connection/session manager owning the single active database driver."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Awaitable, Callable, Sequence

from neo4j import AsyncDriver

from .connections import ConnectionBackend, Neo4jConnectionBackend
from .models import DatabaseProfile
from .query import Neo4jQueryExecutor, QueryExecutor

LOG = logging.getLogger(__name__)

SessionListener = Callable[["SessionState"], None]
ProfilePicker = Callable[[Sequence[str]], Awaitable[str | None]]
WarningNotifier = Callable[[str], None]

NO_DATABASE_MESSAGE = "No database configured"


class SessionPhase(str, Enum):
    """Lifecycle phases of the session manager."""

    DISCONNECTED = "disconnected"
    SELECTING = "selecting"
    CONNECTED = "connected"
    CLOSED = "closed"


class SessionClosedError(RuntimeError):
    """Raised when the manager is used after shutdown."""


@dataclass(frozen=True, slots=True)
class SessionState:
    """Current session snapshot (phase + selected profile)."""

    phase: SessionPhase
    profile: DatabaseProfile | None = None
    connected_at: datetime | None = None

    @property
    def connected(self) -> bool:
        return self.phase is SessionPhase.CONNECTED


class SessionManager:
    """Owns at most one driver and runs queries through it.

    Selection is a state transition: DISCONNECTED or CONNECTED move through
    SELECTING while the picker is open and land back where they were if the
    user cancels. Selections are serialized by a lock, so a query triggered
    while a picker is outstanding waits for it instead of opening another.
    """

    def __init__(
        self,
        profiles: Sequence[DatabaseProfile],
        *,
        picker: ProfilePicker,
        warn: WarningNotifier | None = None,
        backend: ConnectionBackend | None = None,
        query_executor: QueryExecutor | None = None,
    ) -> None:
        self._profiles = tuple(profiles)
        self._picker = picker
        self._warn = warn or (lambda message: LOG.warning(message))
        self._backend = backend or Neo4jConnectionBackend()
        self._query_executor = query_executor or Neo4jQueryExecutor()
        self._driver: AsyncDriver | None = None
        self._state = SessionState(phase=SessionPhase.DISCONNECTED)
        self._selection_lock = asyncio.Lock()
        self._listeners: set[SessionListener] = set()

    @property
    def profiles(self) -> tuple[DatabaseProfile, ...]:
        """Profiles available in the current config."""

        return self._profiles

    @property
    def state(self) -> SessionState:
        """Current session state."""

        return self._state

    @property
    def active_profile(self) -> DatabaseProfile | None:
        return self._state.profile if self._state.connected else None

    async def select_database(self) -> SessionState | None:
        """Prompt for a profile and connect to it.

        Returns the new state, or None when nothing is configured or the
        prompt was cancelled. Neither case touches the current connection.
        """

        self._ensure_open()
        if not self._profiles:
            self._warn(NO_DATABASE_MESSAGE)
            return None
        async with self._selection_lock:
            return await self._prompt_and_connect()

    async def connect(self, name: str) -> SessionState:
        """Activate the named profile without prompting."""

        self._ensure_open()
        profile = self._profile_by_name(name)
        async with self._selection_lock:
            self._set_state(replace(self._state, phase=SessionPhase.SELECTING))
            return await self._activate(profile)

    async def run_query(self, query: str) -> str | None:
        """Run `query` in one write transaction and return the serialized records.

        A disconnected manager prompts for a database first. If that prompt
        yields no connection the query is skipped and None is returned.
        Driver and transaction errors propagate to the caller.
        """

        self._ensure_open()
        if not self._state.connected:
            await self._select_for_query()
        driver, profile = self._driver, self._state.profile
        if driver is None or profile is None or not self._state.connected:
            return None
        return await self._query_executor.execute(driver, profile, query)

    async def close(self) -> None:
        """Shut down: release the active driver and refuse further work."""

        if self._state.phase is SessionPhase.CLOSED:
            return
        profile = self._state.profile
        await self._release_driver(profile)
        self._set_state(SessionState(phase=SessionPhase.CLOSED, profile=profile))

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Subscribe to session updates; returns an unsubscribe handle."""

        self._listeners.add(listener)
        listener(self._state)

        def _unsubscribe() -> None:
            self._listeners.discard(listener)

        return _unsubscribe

    async def _select_for_query(self) -> None:
        if not self._profiles:
            self._warn(NO_DATABASE_MESSAGE)
            return
        async with self._selection_lock:
            # Another trigger may have finished selecting while we waited.
            if self._state.connected:
                return
            await self._prompt_and_connect()

    async def _prompt_and_connect(self) -> SessionState | None:
        previous = self._state
        self._set_state(replace(previous, phase=SessionPhase.SELECTING))
        try:
            picked = await self._picker([profile.name for profile in self._profiles])
        except BaseException:
            self._set_state(previous)
            raise
        profile = self._find_profile(picked) if picked is not None else None
        if profile is None:
            self._set_state(previous)
            return None
        return await self._activate(profile)

    async def _activate(self, profile: DatabaseProfile) -> SessionState:
        await self._release_driver(self._state.profile)
        try:
            self._driver = self._backend.open(profile)
        except Exception:
            self._set_state(SessionState(phase=SessionPhase.DISCONNECTED))
            raise
        LOG.info("Selected database profile", extra={"profile": profile.name})
        self._set_state(
            SessionState(
                phase=SessionPhase.CONNECTED,
                profile=profile,
                connected_at=datetime.now(tz=timezone.utc),
            )
        )
        return self._state

    async def _release_driver(self, profile: DatabaseProfile | None) -> None:
        driver, self._driver = self._driver, None
        if driver is None:
            return
        try:
            await self._backend.close(driver)
        except Exception:
            LOG.exception(
                "Error closing driver",
                extra={"profile": profile.name if profile else None},
            )

    def _profile_by_name(self, name: str) -> DatabaseProfile:
        profile = self._find_profile(name)
        if profile is None:
            raise ValueError(f"Profile '{name}' not found.")
        return profile

    def _find_profile(self, name: str) -> DatabaseProfile | None:
        for profile in self._profiles:
            if profile.name == name:
                return profile
        return None

    def _ensure_open(self) -> None:
        if self._state.phase is SessionPhase.CLOSED:
            raise SessionClosedError("Session manager has been closed.")

    def _set_state(self, state: SessionState) -> None:
        self._state = state
        for listener in tuple(self._listeners):
            listener(state)


__all__ = [
    "NO_DATABASE_MESSAGE",
    "ProfilePicker",
    "SessionClosedError",
    "SessionListener",
    "SessionManager",
    "SessionPhase",
    "SessionState",
    "WarningNotifier",
]
