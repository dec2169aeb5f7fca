"""
Schema builder converting model metadata into DDL statements.
"""

from __future__ import annotations

from typing import List

from ..core.fields import Field
from ..core.model import Model
from ..dialects.base import Dialect
from ..utils import get_logger


class SchemaBuilder:
    """
    Produces dialect-specific SQL for schema manipulation.
    """

    def __init__(self, dialect: Dialect) -> None:
        self.dialect = dialect
        self.logger = get_logger("schema.builder")

    def create_table_sql(self, model: type[Model]) -> str:
        table_name = self.dialect.format_table(model._meta.table_name)
        column_list = ", ".join(self._render_columns(model))
        return f"CREATE TABLE IF NOT EXISTS {table_name} ({column_list})"

    def drop_table_sql(self, model: type[Model]) -> str:
        table_name = self.dialect.format_table(model._meta.table_name)
        self.logger.warning(
            "DROP TABLE generated for %s; existing rows will be lost.",
            table_name,
        )
        return f"DROP TABLE IF EXISTS {table_name}"

    def _render_columns(self, model: type[Model]) -> List[str]:
        pieces: List[str] = []
        for field in model._meta.get_fields():
            if not field.db_type:
                raise ValueError(f"Field '{field.name}' missing db_type for schema generation.")
            column_def = self.dialect.render_column_definition(
                field.column_name(),
                field.db_type,
                nullable=field.nullable,
            )
            extras: List[str] = []
            if field.primary_key:
                extras.append("PRIMARY KEY")
            elif field.unique:
                extras.append("UNIQUE")
            default_sql = self._default_clause(field)
            if default_sql:
                extras.append(default_sql)

            if extras:
                column_def = f"{column_def} {' '.join(extras)}"
            pieces.append(column_def)
        return pieces

    def _default_clause(self, field: Field) -> str | None:
        # Callable defaults are evaluated per instance, not by the database.
        if field.default is None or callable(field.default):
            return None
        return f"DEFAULT {self.dialect.render_literal(field.default)}"
