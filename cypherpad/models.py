"""Shared dataclasses used across connection/session modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class AuthToken:
    """Opaque credential handed to the driver unchanged."""

    scheme: str = "basic"
    principal: str | None = None
    credentials: str | None = None
    realm: str | None = None
    parameters: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class DatabaseProfile:
    """Runtime representation of a database profile."""

    name: str
    url: str
    auth_token: AuthToken | None = None
    database: str | None = None


__all__ = ["AuthToken", "DatabaseProfile"]
