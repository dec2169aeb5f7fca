"""
Transaction levels for a session: one database transaction, savepoints inside it.
"""

from __future__ import annotations

import itertools
from contextlib import contextmanager
from typing import Iterator, List

from ..adapters.base import DatabaseAdapter
from ..dialects.base import Dialect


class TransactionError(RuntimeError):
    """Raised on commit/rollback without an open transaction."""


class TransactionManager:
    """
    Stack of open transaction levels.

    The first level is the database transaction; every further level is a
    savepoint that a commit releases and a rollback undoes. A level is only
    removed from the stack once the database has accepted the commit, so a
    failed commit can still be rolled back.
    """

    def __init__(self, adapter: DatabaseAdapter, dialect: Dialect) -> None:
        self.adapter = adapter
        self.dialect = dialect
        self._savepoints: List[str] = []
        self._open = False
        self._names = itertools.count(1)

    @property
    def depth(self) -> int:
        return len(self._savepoints) + 1 if self._open else 0

    @property
    def active(self) -> bool:
        return self._open

    def begin(self) -> None:
        if not self._open:
            self.adapter.begin()
            self._open = True
            return
        if not self.dialect.supports_savepoints:
            raise TransactionError("Nested transactions need savepoint support.")
        name = f"sp_{next(self._names)}"
        self.adapter.execute(self.dialect.savepoint_sql(name))
        self._savepoints.append(name)

    def commit(self) -> None:
        self._require_open("commit")
        if self._savepoints:
            self.adapter.execute(self.dialect.release_savepoint_sql(self._savepoints[-1]))
            self._savepoints.pop()
        else:
            self.adapter.commit()
            self._open = False

    def rollback(self) -> None:
        self._require_open("roll back")
        if not self._savepoints:
            self._open = False
            self.adapter.rollback()
            return
        name = self._savepoints.pop()
        self.adapter.execute(self.dialect.rollback_to_savepoint_sql(name))
        self.adapter.execute(self.dialect.release_savepoint_sql(name))

    def reset(self) -> None:
        self._savepoints.clear()
        self._open = False

    @contextmanager
    def transaction(self) -> Iterator[None]:
        self.begin()
        try:
            yield
        except BaseException:
            self.rollback()
            raise
        else:
            self.commit()

    def _require_open(self, action: str) -> None:
        if not self._open:
            raise TransactionError(f"No active transaction to {action}.")
