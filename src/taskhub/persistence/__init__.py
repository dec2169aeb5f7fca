"""
Persistence layer components: sessions, change tracking, unit of work.
"""

from .cancellation import CancellationToken, OperationCancelledError
from .change_tracker import ChangeTracker
from .context import DEFAULT_DATABASE_URL_ENV, ContextOptions, DataContext
from .entity_set import EntitySet
from .identity_map import IdentityMap
from .session import Session
from .transaction import TransactionError, TransactionManager
from .unit_of_work import UnitOfWork

__all__ = [
    "CancellationToken",
    "ChangeTracker",
    "ContextOptions",
    "DEFAULT_DATABASE_URL_ENV",
    "DataContext",
    "EntitySet",
    "IdentityMap",
    "OperationCancelledError",
    "Session",
    "TransactionError",
    "TransactionManager",
    "UnitOfWork",
]
