"""
Pending change sets for a session.
"""

from __future__ import annotations

from typing import Iterable, List, Set, Tuple

from ..core.model import Model

Snapshot = Tuple[Set[Model], Set[Model], Set[Model]]


class ChangeTracker:
    """
    Tracks new, dirty, and deleted objects within a session.
    """

    def __init__(self) -> None:
        self.new: Set[Model] = set()
        self.dirty: Set[Model] = set()
        self.deleted: Set[Model] = set()

    # Registration methods ----------------------------------------------
    def register_new(self, instance: Model) -> None:
        self.deleted.discard(instance)
        self.new.add(instance)

    def register_dirty(self, instance: Model) -> None:
        if instance not in self.new and instance not in self.deleted:
            self.dirty.add(instance)

    def register_deleted(self, instance: Model) -> None:
        # Deleting an instance that was never written just forgets it.
        if instance in self.new:
            self.new.discard(instance)
            return
        self.dirty.discard(instance)
        self.deleted.add(instance)

    def collect_dirty(self, candidates: Iterable[Model]) -> None:
        for instance in candidates:
            if instance.is_dirty():
                self.register_dirty(instance)

    # Inspection ----------------------------------------------------------
    def has_changes(self) -> bool:
        return bool(self.new or self.dirty or self.deleted)

    def pending(self) -> List[Model]:
        return [*self.new, *self.dirty]

    def is_tracked(self, instance: Model) -> bool:
        return instance in self.new or instance in self.dirty or instance in self.deleted

    # Snapshots -----------------------------------------------------------
    def snapshot(self) -> Snapshot:
        return (set(self.new), set(self.dirty), set(self.deleted))

    def restore(self, snapshot: Snapshot) -> None:
        new, dirty, deleted = snapshot
        self.new = set(new)
        self.dirty = set(dirty)
        self.deleted = set(deleted)

    def clear(self) -> None:
        self.new.clear()
        self.dirty.clear()
        self.deleted.clear()
