"""
Dialect interface: the SQL text the session, schema builder and adapter emit.
"""

from __future__ import annotations

from typing import Any, Protocol


class Dialect(Protocol):
    supports_savepoints: bool

    def quote_identifier(self, identifier: str) -> str: ...

    def format_table(self, table_name: str) -> str: ...

    def parameter_placeholder(self) -> str: ...

    def render_column_definition(self, column: str, column_type: str, *, nullable: bool) -> str: ...

    def render_literal(self, value: Any) -> str: ...

    def begin_sql(self, isolation_level: str | None = None) -> str:
        """
        Statement opening a transaction. Raises ``ValueError`` for an
        isolation level the backend does not know.
        """

    def savepoint_sql(self, name: str) -> str: ...

    def release_savepoint_sql(self, name: str) -> str: ...

    def rollback_to_savepoint_sql(self, name: str) -> str: ...
