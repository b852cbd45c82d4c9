"""App configuration loading helpers."""

from __future__ import annotations

from pathlib import Path

import tomllib

from typing import Any

from pydantic import BaseModel, Field

from .models import AuthToken, DatabaseProfile

CONFIG_FILE = Path.home() / ".config" / "cypherpad" / "config.toml"

DEFAULT_QUERY_SUFFIX = ".cypher"


class AuthTokenConfig(BaseModel):
    """Credential block nested under a `[[databases]]` entry."""

    scheme: str = "basic"
    principal: str | None = None
    credentials: str | None = None
    realm: str | None = None
    parameters: dict[str, Any] = Field(default_factory=dict)


class DatabaseProfileConfig(BaseModel):
    """Database profile stored in config.toml."""

    name: str
    url: str
    auth: AuthTokenConfig | None = None
    database: str | None = None

    def to_profile(self) -> DatabaseProfile:
        token = None
        if self.auth is not None:
            token = AuthToken(
                scheme=self.auth.scheme,
                principal=self.auth.principal,
                credentials=self.auth.credentials,
                realm=self.auth.realm,
                parameters=dict(self.auth.parameters),
            )
        return DatabaseProfile(name=self.name, url=self.url, auth_token=token, database=self.database)


class DriverSettings(BaseModel):
    """Optional keyword settings forwarded to the driver."""

    connection_timeout: float | None = None
    max_transaction_retry_time: float | None = None

    def as_kwargs(self) -> dict[str, float]:
        return {key: value for key, value in self.model_dump().items() if value is not None}


class AppConfig(BaseModel):
    """Shape of the application configuration file."""

    theme: str = "dark"
    query_suffix: str = DEFAULT_QUERY_SUFFIX
    databases: list[DatabaseProfileConfig] = Field(default_factory=list)
    active_profile: str | None = None
    log_level: str = "INFO"
    log_file: str | None = None
    driver: DriverSettings = Field(default_factory=DriverSettings)

    def profiles(self) -> tuple[DatabaseProfile, ...]:
        """Runtime profiles in configuration order."""

        return tuple(entry.to_profile() for entry in self.databases)

    def with_active_profile(self, name: str | None) -> AppConfig:
        """Return a copy with the active profile updated."""

        return self.model_copy(update={"active_profile": name})


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from disk; fall back to defaults if missing."""

    try:
        data = _read_config_file(path or CONFIG_FILE)
    except FileNotFoundError:
        return AppConfig()
    except (tomllib.TOMLDecodeError, OSError):
        return AppConfig()

    return AppConfig(**data)


def save_config(config: AppConfig, path: Path | None = None) -> None:
    """Persist configuration to disk."""

    target = path or CONFIG_FILE
    target.parent.mkdir(parents=True, exist_ok=True)
    lines: list[str] = [
        f"theme = {_toml_str(config.theme)}",
        f"query_suffix = {_toml_str(config.query_suffix)}",
        f"log_level = {_toml_str(config.log_level)}",
    ]
    if config.log_file:
        lines.append(f"log_file = {_toml_str(config.log_file)}")
    if config.active_profile:
        lines.append(f"active_profile = {_toml_str(config.active_profile)}")
    driver_settings = config.driver.as_kwargs()
    if driver_settings:
        lines.append("")
        lines.append("[driver]")
        for key in sorted(driver_settings):
            lines.append(f"{key} = {_toml_value(driver_settings[key])}")
    if config.databases:
        lines.append("")
        for profile in config.databases:
            lines.append("[[databases]]")
            lines.append(f"name = {_toml_str(profile.name)}")
            lines.append(f"url = {_toml_str(profile.url)}")
            if profile.database:
                lines.append(f"database = {_toml_str(profile.database)}")
            if profile.auth is not None:
                lines.append("")
                lines.append("[databases.auth]")
                lines.append(f"scheme = {_toml_str(profile.auth.scheme)}")
                for key in ("principal", "credentials", "realm"):
                    value = getattr(profile.auth, key)
                    if value is not None:
                        lines.append(f"{key} = {_toml_str(value)}")
                if profile.auth.parameters:
                    lines.append("")
                    lines.append("[databases.auth.parameters]")
                    for key, value in profile.auth.parameters.items():
                        lines.append(f"{_toml_str(key)} = {_toml_value(value)}")
            lines.append("")
    target.write_text("\n".join(lines) + "\n", encoding="utf-8")


_TOML_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
}


def _toml_str(value: str) -> str:
    """Render `value` as a TOML basic string."""

    escaped: list[str] = []
    for char in value:
        if char in _TOML_ESCAPES:
            escaped.append(_TOML_ESCAPES[char])
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            escaped.append(f"\\u{ord(char):04X}")
        else:
            escaped.append(char)
    return '"' + "".join(escaped) + '"'


def _toml_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        return _toml_str(value)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_toml_value(item) for item in value) + "]"
    if isinstance(value, dict):
        items = ", ".join(f"{_toml_str(str(key))} = {_toml_value(item)}" for key, item in value.items())
        return "{" + items + "}"
    raise TypeError(f"Cannot write {type(value).__name__} to the config file.")


def _read_config_file(path: Path) -> dict[str, object]:
    with path.open("rb") as handle:
        raw = tomllib.load(handle)
    data: dict[str, object] = {}
    if not isinstance(raw, dict):
        return data
    for key in ("theme", "query_suffix", "active_profile", "log_level", "log_file"):
        value = raw.get(key)
        if isinstance(value, str):
            data[key] = value
    driver = raw.get("driver")
    if isinstance(driver, dict):
        settings: dict[str, float] = {}
        for key in ("connection_timeout", "max_transaction_retry_time"):
            value = driver.get(key)
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                settings[key] = float(value)
        data["driver"] = DriverSettings(**settings)
    databases = raw.get("databases")
    if isinstance(databases, list):
        parsed_profiles: list[DatabaseProfileConfig] = []
        for profile in databases:
            if not isinstance(profile, dict):
                continue
            name = profile.get("name")
            url = profile.get("url")
            if not isinstance(name, str) or not name or not isinstance(url, str):
                continue
            database = profile.get("database")
            parsed_profiles.append(
                DatabaseProfileConfig(
                    name=name,
                    url=url,
                    database=database if isinstance(database, str) else None,
                    auth=_parse_auth(profile.get("auth")),
                )
            )
        data["databases"] = parsed_profiles
    return data


def _parse_auth(raw: object) -> AuthTokenConfig | None:
    if not isinstance(raw, dict):
        return None
    parsed: dict[str, object] = {}
    for key in ("scheme", "principal", "credentials", "realm"):
        value = raw.get(key)
        if isinstance(value, str):
            parsed[key] = value
    parameters = raw.get("parameters")
    if isinstance(parameters, dict):
        parsed["parameters"] = dict(parameters)
    return AuthTokenConfig(**parsed)


__all__ = [
    "AppConfig",
    "AuthTokenConfig",
    "CONFIG_FILE",
    "DEFAULT_QUERY_SUFFIX",
    "DatabaseProfileConfig",
    "DriverSettings",
    "load_config",
    "save_config",
]
