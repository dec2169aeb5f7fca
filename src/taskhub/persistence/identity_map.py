"""
Identity map: at most one in-memory instance per saved row.
"""

from __future__ import annotations

from threading import RLock
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

from ..core.model import Model

TModel = TypeVar("TModel", bound=Model)


class IdentityMap:
    """
    Saved instances keyed by ``(model, primary key)``.

    Instances without a primary key value are never stored.
    """

    def __init__(self) -> None:
        self._rows: Dict[Tuple[Type[Model], Any], Model] = {}
        self._lock = RLock()

    def load(self, instance: TModel) -> TModel:
        """
        Store ``instance`` unless its row is already mapped, and return the
        mapped instance either way.
        """
        pk = instance.pk
        if pk is None:
            return instance
        with self._lock:
            return self._rows.setdefault((type(instance), pk), instance)  # type: ignore[return-value]

    def get(self, model: Type[TModel], pk: Any) -> Optional[TModel]:
        with self._lock:
            return self._rows.get((model, pk))  # type: ignore[return-value]

    def discard(self, instance: Model) -> None:
        key = (type(instance), instance.pk)
        with self._lock:
            # The row may be mapped to another object, e.g. an unsaved duplicate.
            if self._rows.get(key) is instance:
                del self._rows[key]

    def instances(self, model: Optional[Type[Model]] = None) -> List[Model]:
        with self._lock:
            if model is None:
                return list(self._rows.values())
            return [instance for (cls, _), instance in self._rows.items() if cls is model]

    def clear(self) -> None:
        with self._lock:
            self._rows.clear()

    def __contains__(self, instance: Model) -> bool:
        with self._lock:
            return self._rows.get((type(instance), instance.pk)) is instance

    def __len__(self) -> int:
        with self._lock:
            return len(self._rows)
