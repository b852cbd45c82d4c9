"""Tests for the connection backends."""

from __future__ import annotations

from typing import Any

import neo4j
import pytest

from cypherpad.connections import ConnectionBackendError, Neo4jConnectionBackend, to_driver_auth
from cypherpad.models import AuthToken, DatabaseProfile


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


def test_auth_token_is_passed_through() -> None:
    auth = to_driver_auth(AuthToken(scheme="basic", principal="neo4j", credentials="secret"))

    assert isinstance(auth, neo4j.Auth)
    assert auth.scheme == "basic"
    assert auth.principal == "neo4j"
    assert auth.credentials == "secret"


def test_missing_auth_token_means_no_auth() -> None:
    assert to_driver_auth(None) is None


def test_backend_forwards_url_auth_and_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[tuple[str, dict[str, Any]]] = []
    sentinel = object()

    def _fake_driver(url: str, **kwargs: Any) -> object:
        calls.append((url, kwargs))
        return sentinel

    monkeypatch.setattr("cypherpad.connections.AsyncGraphDatabase.driver", _fake_driver)
    backend = Neo4jConnectionBackend({"connection_timeout": 5.0})
    profile = DatabaseProfile(
        name="Local",
        url="neo4j://localhost:7687",
        auth_token=AuthToken(principal="neo4j", credentials="secret"),
    )

    driver = backend.open(profile)

    assert driver is sentinel
    url, kwargs = calls[0]
    assert url == "neo4j://localhost:7687"
    assert kwargs["connection_timeout"] == 5.0
    assert kwargs["auth"].principal == "neo4j"


def test_backend_rejects_unsupported_url() -> None:
    backend = Neo4jConnectionBackend()
    profile = DatabaseProfile(name="Broken", url="ftp://localhost:7687")

    with pytest.raises(ConnectionBackendError, match="Broken"):
        backend.open(profile)


def test_backend_wraps_missing_optional_driver_dependency(monkeypatch: pytest.MonkeyPatch) -> None:
    def _fake_driver(url: str, **kwargs: Any) -> object:
        raise ModuleNotFoundError("No module named 'aiohttp'")

    monkeypatch.setattr("cypherpad.connections.AsyncGraphDatabase.driver", _fake_driver)
    backend = Neo4jConnectionBackend()
    profile = DatabaseProfile(name="Http", url="http://localhost:7474")

    with pytest.raises(ConnectionBackendError, match="Http") as excinfo:
        backend.open(profile)

    assert isinstance(excinfo.value.__cause__, ModuleNotFoundError)


@pytest.mark.anyio
async def test_backend_builds_lazy_driver_and_closes_it() -> None:
    backend = Neo4jConnectionBackend()
    profile = DatabaseProfile(name="Local", url="neo4j://localhost:7687")

    driver = backend.open(profile)
    try:
        assert isinstance(driver, neo4j.AsyncDriver)
    finally:
        await backend.close(driver)
