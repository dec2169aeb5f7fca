"""
Session management coordinating adapters, change tracking, and identity map.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple, Type, TypeVar

from ..adapters.base import ConnectionConfig, DatabaseAdapter
from ..core.model import Model
from ..dialects.base import Dialect
from ..security.redaction import redact_params
from ..utils import get_logger, time_call
from .cancellation import CancellationToken, check_cancelled
from .change_tracker import ChangeTracker
from .identity_map import IdentityMap
from .transaction import TransactionManager

TModel = TypeVar("TModel", bound=Model)


class Session:
    """
    Coordinates persistence operations for a set of model instances.

    ``commit`` and ``flush`` return the number of rows the INSERT, UPDATE
    and DELETE statements affected. Driver errors propagate unchanged.
    """

    def __init__(
        self,
        adapter: DatabaseAdapter,
        *,
        connection_config: Optional[ConnectionConfig] = None,
        dsn: Optional[str] = None,
    ) -> None:
        if connection_config is not None and dsn is not None:
            raise ValueError("Pass either connection_config or dsn, not both.")
        if dsn is not None:
            connection_config = ConnectionConfig.from_dsn(dsn)
        self.adapter = adapter
        self.dialect: Dialect = adapter.dialect
        self.connection_config = connection_config or ConnectionConfig(url="sqlite:///:memory:")
        self.identity_map = IdentityMap()
        self.tracker = ChangeTracker()
        self.transaction_manager = TransactionManager(adapter, self.dialect)
        self._tracker_snapshots: list = []
        self.logger = get_logger("persistence.session")
        self.adapter.connect(self.connection_config)

    # ------------------------------------------------------------------ #
    # Context management
    # ------------------------------------------------------------------ #
    def __enter__(self) -> "Session":
        self.begin()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if exc_type:
                self.rollback()
            else:
                self.commit()
        finally:
            self.close()

    # ------------------------------------------------------------------ #
    def begin(self) -> None:
        self.transaction_manager.begin()
        self._tracker_snapshots.append(self.tracker.snapshot())

    def commit(self, cancellation_token: CancellationToken | None = None) -> int:
        """
        Flush pending changes and commit the innermost transaction.

        A transaction is opened when none is active. On any failure the
        transaction level is rolled back, the pending change sets and the
        instances' tracked state are restored, and the error is re-raised.
        """
        check_cancelled(cancellation_token)
        if not self.transaction_manager.active:
            self.begin()
        self.tracker.collect_dirty(self.identity_map.instances())
        states = self._capture_states()
        try:
            affected = self.flush(cancellation_token)
            self.transaction_manager.commit()
        except BaseException:
            self._restore_states(states)
            self.rollback()
            raise
        if self._tracker_snapshots:
            self._tracker_snapshots.pop()
        return affected

    def rollback(self) -> None:
        self.transaction_manager.rollback()
        if self._tracker_snapshots:
            self.tracker.restore(self._tracker_snapshots.pop())
        else:
            self.tracker.clear()

    def close(self) -> None:
        if self.transaction_manager.active and self.adapter.is_connected:
            self.adapter.rollback()
        self.transaction_manager.reset()
        self.adapter.close()
        self.identity_map.clear()
        self.tracker.clear()
        self._tracker_snapshots.clear()

    @property
    def is_closed(self) -> bool:
        return not self.adapter.is_connected

    # ------------------------------------------------------------------ #
    # Registration
    # ------------------------------------------------------------------ #
    def add(self, instance: Model) -> None:
        self.tracker.register_new(instance)

    def delete(self, instance: Model) -> None:
        self.tracker.register_deleted(instance)

    def mark_dirty(self, instance: Model) -> None:
        self.tracker.register_dirty(instance)

    # ------------------------------------------------------------------ #
    def flush(self, cancellation_token: CancellationToken | None = None) -> int:
        """
        Write pending changes inside the current transaction.

        Every new and dirty instance is validated before the first statement
        is sent, so a constraint violation leaves the database untouched.
        """
        self.tracker.collect_dirty(self.identity_map.instances())
        for instance in self.tracker.pending():
            instance.full_clean()

        inserted = updated = deleted = 0
        affected = 0
        for instance in list(self.tracker.new):
            check_cancelled(cancellation_token)
            affected += self._persist_new(instance)
            self.tracker.new.discard(instance)
            inserted += 1
        for instance in list(self.tracker.dirty):
            check_cancelled(cancellation_token)
            rows = self._persist_dirty(instance)
            affected += rows
            self.tracker.dirty.discard(instance)
            updated += 1 if rows else 0
        for instance in list(self.tracker.deleted):
            check_cancelled(cancellation_token)
            affected += self._persist_deleted(instance)
            self.tracker.deleted.discard(instance)
            deleted += 1

        if affected:
            self.logger.debug(
                "Flushed %s insert(s), %s update(s), %s delete(s); %s row(s) affected",
                inserted,
                updated,
                deleted,
                affected,
            )
        return affected

    # ------------------------------------------------------------------ #
    # Loading
    # ------------------------------------------------------------------ #
    def get(self, model: Type[TModel], **filters: Any) -> Optional[TModel]:
        if len(filters) != 1:
            raise ValueError("Session.get supports exactly one filter.")
        field_name, value = next(iter(filters.items()))
        field = model._meta.get_field(field_name)
        value = field.to_python(value)

        if field.primary_key:
            cached = self.identity_map.get(model, value)
            if cached is not None:
                return cached  # type: ignore[return-value]

        column = self.dialect.quote_identifier(field.column_name())
        sql = (
            f"SELECT {self._select_list(model)} FROM {self.dialect.format_table(model._meta.table_name)} "
            f"WHERE {column} = {self.dialect.parameter_placeholder()} LIMIT 1"
        )
        row = self.execute(sql, (field.get_db_prep_value(value),), columns=[field.column_name()]).fetchone()
        if not row:
            return None
        return self._load(model, row)

    def all(self, model: Type[TModel]) -> List[TModel]:
        pk_field = model._meta.primary_key
        order = f" ORDER BY {self.dialect.quote_identifier(pk_field.column_name())}" if pk_field else ""
        sql = f"SELECT {self._select_list(model)} FROM {self.dialect.format_table(model._meta.table_name)}{order}"
        return [self._load(model, row) for row in self.execute(sql).fetchall()]

    def count(self, model: Type[Model]) -> int:
        sql = f"SELECT COUNT(*) FROM {self.dialect.format_table(model._meta.table_name)}"
        return int(self.execute(sql).fetchone()[0])

    def execute(self, sql: str, params: Iterable[Any] | None = None, *, columns: Sequence[str] | None = None):
        param_list = list(params or [])
        with time_call(
            "session.execute",
            self.logger,
            sql=sql,
            params=redact_params(param_list, columns),
            threshold_ms=200,
        ):
            return self.adapter.execute(sql, param_list, columns=columns)

    # ------------------------------------------------------------------ #
    @contextmanager
    def transaction(self):
        """
        Provide nested transaction context with savepoint support.
        """

        self.begin()
        try:
            yield self
        except BaseException:
            self.rollback()
            raise
        else:
            self.commit()

    # ------------------------------------------------------------------ #
    # Persistence helpers
    # ------------------------------------------------------------------ #
    def _persist_new(self, instance: Model) -> int:
        table = self.dialect.format_table(instance._meta.table_name)
        columns: List[str] = []
        params: List[Any] = []
        for field in instance._meta.get_fields():
            value = instance._field_values.get(field.require_name())
            if field.primary_key and value is None:
                continue
            columns.append(field.column_name())
            params.append(field.get_db_prep_value(value))

        placeholders = ", ".join(self.dialect.parameter_placeholder() for _ in columns)
        columns_sql = ", ".join(self.dialect.quote_identifier(column) for column in columns)
        sql = f"INSERT INTO {table} ({columns_sql}) VALUES ({placeholders})"
        cursor = self.execute(sql, params, columns=columns)

        pk_field = instance._meta.primary_key
        if pk_field and getattr(instance, pk_field.require_name(), None) is None:
            pk_value = self.adapter.last_insert_id(cursor)
            setattr(instance, pk_field.require_name(), pk_value)

        instance._initial_state = dict(instance._field_values)
        self.identity_map.load(instance)
        return cursor.rowcount

    def _persist_dirty(self, instance: Model) -> int:
        pk_field = instance._meta.primary_key
        if pk_field is None:
            raise ValueError(f"Model '{instance.__class__.__name__}' lacks a primary key.")
        pk_value = instance.pk
        if pk_value is None:
            raise ValueError("Dirty instance missing primary key value.")

        columns: List[str] = []
        params: List[Any] = []
        for name in instance.changed_fields():
            field = instance._meta.get_field(name)
            if field.primary_key:
                continue
            columns.append(field.column_name())
            params.append(field.get_db_prep_value(instance._field_values.get(name)))

        if not columns:
            return 0

        placeholder = self.dialect.parameter_placeholder()
        set_sql = ", ".join(f"{self.dialect.quote_identifier(column)} = {placeholder}" for column in columns)
        pk_clause = f"{self.dialect.quote_identifier(pk_field.column_name())} = {placeholder}"
        params.append(pk_field.get_db_prep_value(pk_value))
        columns.append(pk_field.column_name())
        table = self.dialect.format_table(instance._meta.table_name)
        cursor = self.execute(f"UPDATE {table} SET {set_sql} WHERE {pk_clause}", params, columns=columns)
        instance._initial_state = dict(instance._field_values)
        return cursor.rowcount

    def _persist_deleted(self, instance: Model) -> int:
        pk_field = instance._meta.primary_key
        if pk_field is None:
            raise ValueError(f"Model '{instance.__class__.__name__}' lacks a primary key.")
        pk_value = instance.pk
        if pk_value is None:
            return 0
        table = self.dialect.format_table(instance._meta.table_name)
        pk_clause = f"{self.dialect.quote_identifier(pk_field.column_name())} = {self.dialect.parameter_placeholder()}"
        cursor = self.execute(
            f"DELETE FROM {table} WHERE {pk_clause}",
            (pk_field.get_db_prep_value(pk_value),),
            columns=[pk_field.column_name()],
        )
        self.identity_map.discard(instance)
        return cursor.rowcount

    def _load(self, model: Type[TModel], row) -> TModel:
        return self.identity_map.load(model.from_row(row))

    def _select_list(self, model: Type[Model]) -> str:
        return ", ".join(self.dialect.quote_identifier(f.column_name()) for f in model._meta.get_fields())

    # ------------------------------------------------------------------ #
    def _capture_states(self) -> _FlushState:
        instances = [*self.tracker.new, *self.tracker.dirty, *self.tracker.deleted]
        return _FlushState(
            new=set(self.tracker.new),
            deleted=set(self.tracker.deleted),
            values={
                instance: (dict(instance._field_values), dict(instance._initial_state))
                for instance in instances
            },
        )

    def _restore_states(self, state: _FlushState) -> None:
        for instance in state.new:
            self.identity_map.discard(instance)
        for instance, (field_values, initial_state) in state.values.items():
            instance._field_values = field_values
            instance._initial_state = initial_state
        for instance in state.deleted:
            self.identity_map.load(instance)


@dataclass
class _FlushState:
    new: Set[Model]
    deleted: Set[Model]
    values: Dict[Model, Tuple[Dict[str, Any], Dict[str, Any]]]
