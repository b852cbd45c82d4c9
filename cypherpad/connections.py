"""Connection backends powering the session manager."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol, runtime_checkable

import neo4j
from neo4j import AsyncDriver, AsyncGraphDatabase
from neo4j.exceptions import ConfigurationError

from .models import AuthToken, DatabaseProfile

LOG = logging.getLogger(__name__)


class ConnectionBackendError(RuntimeError):
    """Raised when a backend cannot build a driver for a profile."""


@runtime_checkable
class ConnectionBackend(Protocol):
    """Protocol implemented by connection backends."""

    def open(self, profile: DatabaseProfile) -> AsyncDriver:
        """Create a driver for the profile."""

    async def close(self, driver: AsyncDriver) -> None:
        """Release a driver created by `open`."""


class Neo4jConnectionBackend:
    """Connection backend that builds async Neo4j drivers."""

    def __init__(self, driver_settings: Mapping[str, Any] | None = None) -> None:
        self._driver_settings = dict(driver_settings or {})

    def open(self, profile: DatabaseProfile) -> AsyncDriver:
        try:
            driver = AsyncGraphDatabase.driver(
                profile.url,
                auth=to_driver_auth(profile.auth_token),
                **self._driver_settings,
            )
        except (ValueError, ImportError, ConfigurationError) as exc:
            raise ConnectionBackendError(f"Failed to configure profile '{profile.name}': {exc}") from exc
        LOG.info("Driver configured", extra={"profile": profile.name, "url": profile.url})
        return driver

    async def close(self, driver: AsyncDriver) -> None:
        await driver.close()


def to_driver_auth(token: AuthToken | None) -> neo4j.Auth | None:
    """Translate a stored credential into the driver's auth object."""

    if token is None:
        return None
    return neo4j.Auth(
        token.scheme,
        token.principal,
        token.credentials,
        token.realm,
        **dict(token.parameters),
    )


__all__ = [
    "ConnectionBackend",
    "ConnectionBackendError",
    "Neo4jConnectionBackend",
    "to_driver_auth",
]
