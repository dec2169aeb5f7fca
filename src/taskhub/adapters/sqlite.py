"""
SQLite database adapter implementation.
"""

from __future__ import annotations

import sqlite3
from typing import Any, Sequence
from urllib.parse import quote, urlencode

from ..dialects.sqlite import SQLiteDialect
from ..security.redaction import redact_params
from ..utils import get_logger, time_call
from .base import AdapterConfigurationError, AdapterConnectionError, ConnectionConfig

DEFAULT_TIMEOUT = 5.0


class SQLiteAdapter:
    """
    Adapter over the stdlib ``sqlite3`` module.

    Driver exceptions (``sqlite3.IntegrityError`` and friends) are not
    wrapped; callers see exactly what sqlite3 raised.
    """

    def __init__(self) -> None:
        self.dialect = SQLiteDialect()
        self.logger = get_logger("adapters.sqlite")
        self._connection: sqlite3.Connection | None = None
        self._begin_sql = "BEGIN"

    @property
    def is_connected(self) -> bool:
        return self._connection is not None

    def connect(self, config: ConnectionConfig) -> sqlite3.Connection:
        if config.driver != "sqlite":
            raise AdapterConfigurationError(
                f"SQLiteAdapter cannot open '{config.redacted_dsn()}'; expected a sqlite:/// URL."
            )
        try:
            begin_sql = self.dialect.begin_sql(config.isolation_level)
        except ValueError as exc:
            raise AdapterConfigurationError(str(exc)) from exc
        target, uri = self._target(config)

        try:
            connection = sqlite3.connect(
                target,
                uri=uri,
                # "" keeps sqlite3 from committing on its own; None is autocommit.
                isolation_level=None if config.autocommit else "",
                timeout=DEFAULT_TIMEOUT if config.timeout is None else config.timeout,
                check_same_thread=False,
            )
        except sqlite3.Error as exc:
            raise AdapterConnectionError(
                f"Unable to open SQLite database {config.descriptive_label()}: {exc}"
            ) from exc
        connection.row_factory = sqlite3.Row
        connection.execute("PRAGMA foreign_keys = ON")

        self._connection = connection
        self._begin_sql = begin_sql
        self.logger.debug("Connected to %s", config.descriptive_label())
        return connection

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None

    def execute(
        self, sql: str, params: Sequence[Any] | None = None, *, columns: Sequence[str] | None = None
    ) -> sqlite3.Cursor:
        cursor = self._require_connection().cursor()
        params = tuple(params or ())
        with time_call("sqlite.execute", self.logger, sql=sql, params=redact_params(params, columns)):
            cursor.execute(sql, params)
        return cursor

    def begin(self) -> None:
        self._require_connection().execute(self._begin_sql)

    def commit(self) -> None:
        self._require_connection().commit()

    def rollback(self) -> None:
        self._require_connection().rollback()

    def last_insert_id(self, cursor: sqlite3.Cursor) -> Any:
        return cursor.lastrowid

    # ------------------------------------------------------------------ #
    def _require_connection(self) -> sqlite3.Connection:
        if self._connection is None:
            raise AdapterConnectionError("SQLiteAdapter is not connected.")
        return self._connection

    @staticmethod
    def _target(config: ConnectionConfig) -> tuple[str, bool]:
        """
        Filename for ``sqlite3.connect``, or a ``file:`` URI when the
        configuration carries URI parameters.
        """
        assert config.dsn is not None
        database = config.dsn.database
        if not database:
            raise AdapterConfigurationError(
                f"SQLite URL '{config.redacted_dsn()}' does not name a database file."
            )
        if not config.options:
            return database, False
        return f"file:{quote(database, safe='/:')}?{urlencode(config.options)}", True
