"""
Data context: configured models, entity sets and a session behind them.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, Dict, Iterator, List, Type, TypeVar

from ..adapters.base import ConnectionConfig, DatabaseAdapter
from ..adapters.sqlite import SQLiteAdapter
from ..core.model import Model, ModelConfigurationError
from ..schema.builder import SchemaBuilder
from ..schema.model_builder import ModelBuilder
from ..utils import get_logger
from .cancellation import CancellationToken, check_cancelled
from .entity_set import EntitySet
from .session import Session

TModel = TypeVar("TModel", bound=Model)

DEFAULT_DATABASE_URL_ENV = "TASKHUB_DATABASE_URL"


@dataclass
class ContextOptions:
    """
    How a data context reaches its database.
    """

    connection_config: ConnectionConfig
    adapter_factory: Callable[[], DatabaseAdapter] = field(default=SQLiteAdapter)

    @classmethod
    def use_sqlite(cls, url: str = "sqlite:///:memory:", **kwargs: Any) -> "ContextOptions":
        return cls(connection_config=ConnectionConfig.from_dsn(url, **kwargs))

    @classmethod
    def from_env(cls, env_var: str = DEFAULT_DATABASE_URL_ENV, **kwargs: Any) -> "ContextOptions":
        return cls(connection_config=ConnectionConfig.from_env(env_var, **kwargs))

    def create_session(self) -> Session:
        return Session(self.adapter_factory(), connection_config=self.connection_config)


class DataContext:
    """
    Base class for application contexts.

    Subclasses declare their models in :meth:`on_model_creating`; the
    configuration runs once per subclass, the first time one is created.
    """

    _model_cache: ClassVar[Dict[type, List[Type[Model]]]] = {}
    _model_cache_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, options: ContextOptions) -> None:
        self.options = options
        self.logger = get_logger("persistence.context")
        self.models = self._configure_models()
        self.session = options.create_session()
        self._sets: Dict[Type[Model], EntitySet] = {}
        self.logger.debug(
            "%s opened on %s",
            self.__class__.__name__,
            options.connection_config.descriptive_label(),
        )

    def on_model_creating(self, builder: ModelBuilder) -> None:
        """
        Hook for subclasses to declare and configure their models.
        """
        return None

    def _configure_models(self) -> List[Type[Model]]:
        cls = type(self)
        with DataContext._model_cache_lock:
            models = DataContext._model_cache.get(cls)
            if models is None:
                builder = ModelBuilder()
                self.on_model_creating(builder)
                models = builder.models
                DataContext._model_cache[cls] = models
        return list(models)

    # ------------------------------------------------------------------ #
    def set(self, model: Type[TModel]) -> EntitySet[TModel]:
        if model not in self.models:
            raise ModelConfigurationError(
                f"{model.__name__} is not part of {self.__class__.__name__}'s model."
            )
        entity_set = self._sets.get(model)
        if entity_set is None:
            entity_set = EntitySet(self.session, model)
            self._sets[model] = entity_set
        return entity_set

    def save_changes(self, cancellation_token: CancellationToken | None = None) -> int:
        """
        Write every tracked change in one transaction and return the number
        of affected rows. Errors from validation, the driver or the
        cancellation token are raised unchanged; pending changes stay
        tracked after a failure.

        Inside :meth:`transaction` the save runs under a savepoint and only
        becomes durable when the enclosing transaction commits.
        """
        if self.session.transaction_manager.active:
            check_cancelled(cancellation_token)
            self.session.begin()
        affected = self.session.commit(cancellation_token)
        self.logger.debug("%s saved %s change(s)", self.__class__.__name__, affected)
        return affected

    def has_changes(self) -> bool:
        self.session.tracker.collect_dirty(self.session.identity_map.instances())
        return self.session.tracker.has_changes()

    @contextmanager
    def transaction(self) -> Iterator["DataContext"]:
        with self.session.transaction():
            yield self

    # ------------------------------------------------------------------ #
    # Schema
    # ------------------------------------------------------------------ #
    def ensure_created(self) -> None:
        builder = SchemaBuilder(self.session.dialect)
        with self.session.transaction_manager.transaction():
            for model in self.models:
                self.session.execute(builder.create_table_sql(model))

    def ensure_deleted(self) -> None:
        builder = SchemaBuilder(self.session.dialect)
        with self.session.transaction_manager.transaction():
            for model in reversed(self.models):
                self.session.execute(builder.drop_table_sql(model))

    # ------------------------------------------------------------------ #
    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
