"""
taskhub data-access package.

Exposes the persistence primitives and the application context used by the
task-management backend.
"""

from .adapters import ConnectionConfig, SQLiteAdapter  # noqa: F401
from .core import IntegerField, Model, ModelConfigurationError, StringField, UUIDField  # noqa: F401
from .dal import ApplicationContext, Employee  # noqa: F401
from .persistence import (  # noqa: F401
    CancellationToken,
    ContextOptions,
    DataContext,
    EntitySet,
    OperationCancelledError,
    Session,
    UnitOfWork,
)
from .schema import ModelBuilder, SchemaBuilder  # noqa: F401
from .validation import ValidationError  # noqa: F401

__all__ = [
    "ApplicationContext",
    "CancellationToken",
    "ConnectionConfig",
    "ContextOptions",
    "DataContext",
    "Employee",
    "EntitySet",
    "IntegerField",
    "Model",
    "ModelBuilder",
    "ModelConfigurationError",
    "OperationCancelledError",
    "SQLiteAdapter",
    "SchemaBuilder",
    "Session",
    "StringField",
    "UUIDField",
    "UnitOfWork",
    "ValidationError",
]
