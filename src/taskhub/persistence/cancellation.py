"""
Cooperative cancellation for blocking persistence calls.
"""

from __future__ import annotations

import threading


class OperationCancelledError(Exception):
    """Raised when a cancellation token is observed as cancelled."""


class CancellationToken:
    """
    Flag another thread (or a timeout handler) can set to abort a save.

    The session checks the token before it opens a transaction and before
    every statement it sends, so a cancellation takes effect at the next
    statement boundary rather than mid-statement.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    @classmethod
    def cancelled(cls) -> "CancellationToken":
        token = cls()
        token.cancel()
        return token

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self.is_cancelled:
            raise OperationCancelledError("The operation was cancelled.")


def check_cancelled(token: CancellationToken | None) -> None:
    if token is not None:
        token.raise_if_cancelled()
