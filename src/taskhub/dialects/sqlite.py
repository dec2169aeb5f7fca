"""
SQLite dialect.
"""

from __future__ import annotations

from typing import Any

_ISOLATION_LEVELS = ("DEFERRED", "IMMEDIATE", "EXCLUSIVE")


class SQLiteDialect:
    """
    Double-quoted identifiers, ``?`` placeholders and SQLite's
    ``BEGIN DEFERRED | IMMEDIATE | EXCLUSIVE`` transaction modes.
    """

    supports_savepoints = True

    def quote_identifier(self, identifier: str) -> str:
        return '"' + identifier.replace('"', '""') + '"'

    def format_table(self, table_name: str) -> str:
        return self.quote_identifier(table_name)

    def parameter_placeholder(self) -> str:
        return "?"

    def render_column_definition(self, column: str, column_type: str, *, nullable: bool) -> str:
        definition = f"{self.quote_identifier(column)} {column_type}"
        return definition if nullable else f"{definition} NOT NULL"

    def render_literal(self, value: Any) -> str:
        # SQLite has no boolean type; bool must be checked before int.
        if isinstance(value, bool):
            return "1" if value else "0"
        if isinstance(value, (int, float)):
            return repr(value)
        return "'" + str(value).replace("'", "''") + "'"

    def begin_sql(self, isolation_level: str | None = None) -> str:
        if not isolation_level:
            return "BEGIN"
        mode = isolation_level.upper()
        if mode not in _ISOLATION_LEVELS:
            raise ValueError(
                f"Unsupported SQLite isolation level '{isolation_level}'; "
                f"expected one of {', '.join(_ISOLATION_LEVELS)}."
            )
        return f"BEGIN {mode}"

    def savepoint_sql(self, name: str) -> str:
        return f"SAVEPOINT {self.quote_identifier(name)}"

    def release_savepoint_sql(self, name: str) -> str:
        return f"RELEASE SAVEPOINT {self.quote_identifier(name)}"

    def rollback_to_savepoint_sql(self, name: str) -> str:
        return f"ROLLBACK TO SAVEPOINT {self.quote_identifier(name)}"
