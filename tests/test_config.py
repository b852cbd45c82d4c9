"""Tests for AppConfig helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from cypherpad import config as config_module
from cypherpad.config import (
    AppConfig,
    AuthTokenConfig,
    DatabaseProfileConfig,
    DriverSettings,
    load_config,
    save_config,
)
from cypherpad.models import AuthToken, DatabaseProfile


def test_defaults_have_no_databases() -> None:
    config = AppConfig()

    assert config.databases == []
    assert config.profiles() == ()
    assert config.query_suffix == ".cypher"


def test_load_config_returns_defaults_when_missing(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config_module, "CONFIG_FILE", tmp_path / "config.toml")

    result = load_config()

    assert result == AppConfig()


def test_load_config_reads_values(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        """
theme = "light"
query_suffix = ".cql"
active_profile = "Local"
log_file = "/tmp/cypherpad.log"

[driver]
connection_timeout = 5
max_transaction_retry_time = 12.5

[[databases]]
name = "Local"
url = "neo4j://localhost:7687"
database = "neo4j"

[databases.auth]
scheme = "basic"
principal = "neo4j"
credentials = "secret"

[[databases]]
name = "Aura"
url = "neo4j+s://example.databases.neo4j.io"
"""
    )
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_path)

    result = load_config()

    assert result.theme == "light"
    assert result.query_suffix == ".cql"
    assert result.active_profile == "Local"
    assert result.log_file == "/tmp/cypherpad.log"
    assert result.driver.as_kwargs() == {"connection_timeout": 5.0, "max_transaction_retry_time": 12.5}
    assert [entry.name for entry in result.databases] == ["Local", "Aura"]
    local, aura = result.profiles()
    assert local == DatabaseProfile(
        name="Local",
        url="neo4j://localhost:7687",
        auth_token=AuthToken(scheme="basic", principal="neo4j", credentials="secret"),
        database="neo4j",
    )
    assert aura.auth_token is None
    assert aura.database is None


def test_load_config_skips_incomplete_profiles(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        """
[[databases]]
name = "No url"

[[databases]]
url = "neo4j://nameless:7687"

[[databases]]
name = "Good"
url = "bolt://localhost:7687"
"""
    )

    result = load_config(config_path)

    assert [entry.name for entry in result.databases] == ["Good"]


def test_load_config_handles_toml_errors(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text("theme = [unterminated")
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_path)

    result = load_config()

    assert result == AppConfig()


def test_save_config_round_trips_through_load(tmp_path: Path) -> None:
    config_path = tmp_path / "nested" / "config.toml"
    original = AppConfig(
        theme="light",
        active_profile="Local",
        driver=DriverSettings(connection_timeout=3.0),
        databases=[
            DatabaseProfileConfig(
                name="Local",
                url="neo4j://localhost:7687",
                database="neo4j",
                auth=AuthTokenConfig(principal="neo4j", credentials="secret"),
            ),
            DatabaseProfileConfig(name="Replica", url="neo4j://replica:7687"),
        ],
    )

    save_config(original, config_path)

    content = config_path.read_text()
    assert "[[databases]]" in content
    assert "[databases.auth]" in content
    assert "[driver]" in content
    assert load_config(config_path) == original


def test_with_active_profile_updates_field() -> None:
    config = AppConfig()

    updated = config.with_active_profile("Local")

    assert updated.active_profile == "Local"
    assert config.active_profile is None


@pytest.mark.parametrize("credentials", ['pa\\ss', 'pa"ss', "tab\there", "line\nbreak", "bell\x07", "ünïcødé"])
def test_save_config_escapes_string_values(tmp_path: Path, credentials: str) -> None:
    config_path = tmp_path / "config.toml"
    original = AppConfig(
        active_profile='Team "A"',
        databases=[
            DatabaseProfileConfig(
                name='Team "A"',
                url="neo4j://localhost:7687",
                auth=AuthTokenConfig(principal="neo4j", credentials=credentials),
            ),
        ],
    )

    save_config(original, config_path)
    loaded = load_config(config_path)

    assert [entry.name for entry in loaded.databases] == ['Team "A"']
    assert loaded == original


def test_save_config_keeps_auth_parameters(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    original = AppConfig(
        databases=[
            DatabaseProfileConfig(
                name="SSO",
                url="neo4j+s://example.databases.neo4j.io",
                auth=AuthTokenConfig(
                    scheme="custom",
                    principal="svc",
                    credentials="token",
                    realm="corp",
                    parameters={"tenant": "acme", "retries": 3, "strict": True, "scopes": ["read", "write"]},
                ),
            ),
        ],
    )

    save_config(original, config_path)

    assert "[databases.auth.parameters]" in config_path.read_text()
    loaded = load_config(config_path)
    assert loaded.databases[0].auth is not None
    assert loaded.databases[0].auth.parameters == {
        "tenant": "acme",
        "retries": 3,
        "strict": True,
        "scopes": ["read", "write"],
    }
    assert loaded == original
