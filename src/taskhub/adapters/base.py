"""
Adapter protocol and connection configuration.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol, Sequence

from ..dialects.base import Dialect
from ..security.dsns import DSNConfig, parse_dsn


class AdapterError(RuntimeError):
    """Base error for adapter-related failures."""


class AdapterConfigurationError(AdapterError):
    """Raised when connection configuration is invalid."""


class AdapterConnectionError(AdapterError):
    """Raised when a connection is missing or cannot be established."""


_BOOLEANS = {"1": True, "true": True, "yes": True, "on": True, "0": False, "false": False, "no": False, "off": False}


def _take_bool(query: Dict[str, str], key: str) -> Optional[bool]:
    if key not in query:
        return None
    raw = query.pop(key)
    try:
        return _BOOLEANS[raw.strip().lower()]
    except KeyError:
        raise AdapterConfigurationError(f"Invalid boolean value for '{key}': {raw!r}") from None


def _take_float(query: Dict[str, str], key: str) -> Optional[float]:
    if key not in query:
        return None
    raw = query.pop(key)
    try:
        return float(raw)
    except ValueError as exc:
        raise AdapterConfigurationError(f"Invalid float value for '{key}': {raw!r}") from exc


@dataclass
class ConnectionConfig:
    """
    Where and how to connect.

    ``options`` are passed to the database as SQLite URI parameters, e.g.
    ``mode=ro`` or ``cache=shared``.
    """

    url: str
    autocommit: bool = False
    isolation_level: str | None = None
    timeout: float | None = None
    options: Dict[str, str] | None = None
    dsn: DSNConfig | None = None
    source: str | None = None

    def __post_init__(self) -> None:
        if self.dsn is None:
            self.dsn = parse_dsn(self.url)

    @property
    def driver(self) -> str:
        assert self.dsn is not None
        return self.dsn.driver

    @classmethod
    def from_dsn(cls, dsn: str, **overrides: Any) -> "ConnectionConfig":
        """
        Parse ``dsn``. The ``autocommit``, ``timeout`` and
        ``isolation_level`` query parameters become config attributes; the
        remaining ones become ``options``. Keyword arguments win over the URL.
        """
        parsed = parse_dsn(dsn)
        query = dict(parsed.query)
        settings: Dict[str, Any] = {
            "autocommit": _take_bool(query, "autocommit") or False,
            "timeout": _take_float(query, "timeout"),
            "isolation_level": query.pop("isolation_level", None),
        }
        options = {**query, **(overrides.pop("options", None) or {})}
        settings.update(overrides)
        return cls(url=dsn, dsn=parsed, options=options or None, **settings)

    @classmethod
    def from_env(cls, env_var: str, **overrides: Any) -> "ConnectionConfig":
        value = os.getenv(env_var)
        if not value:
            raise AdapterConfigurationError(f"Environment variable {env_var} is not set")
        return cls.from_dsn(value, source=env_var, **overrides)

    def redacted_dsn(self) -> str:
        return self.dsn.redacted() if self.dsn else self.url

    def descriptive_label(self) -> str:
        """
        Log-safe description, naming the environment variable when the URL
        came from one.
        """
        redacted = self.redacted_dsn()
        return f"{self.source} ({redacted})" if self.source else redacted


class DatabaseAdapter(Protocol):
    """
    What a session needs from a database driver.

    Driver exceptions are expected to propagate unchanged.
    """

    dialect: Dialect

    @property
    def is_connected(self) -> bool: ...

    def connect(self, config: ConnectionConfig) -> Any: ...

    def close(self) -> None: ...

    def execute(
        self, sql: str, params: Sequence[Any] | None = None, *, columns: Sequence[str] | None = None
    ) -> Any:
        """
        Run one statement and return its cursor. ``columns`` names the bound
        parameters so logged values can be redacted.
        """

    def begin(self) -> None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...

    def last_insert_id(self, cursor: Any) -> Any: ...
