"""
Unit of work abstraction handed to application code.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .cancellation import CancellationToken


@runtime_checkable
class UnitOfWork(Protocol):
    """
    Commits every change currently tracked by the underlying context.

    Implementations return the number of affected rows as reported by the
    database and let storage errors propagate unchanged.
    """

    def save_changes(self, cancellation_token: CancellationToken | None = None) -> int: ...
