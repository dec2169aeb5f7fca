"""
Tracked collection of one model type exposed by a data context.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, Iterable, Iterator, List, Optional, Type, TypeVar

from ..core.model import Model

if TYPE_CHECKING:
    from .session import Session

TModel = TypeVar("TModel", bound=Model)


class EntitySet(Generic[TModel]):
    """
    Adds, removes and loads instances of a single model through a session.

    Nothing is written until the owning context saves its changes.
    """

    def __init__(self, session: "Session", model: Type[TModel]) -> None:
        self.session = session
        self.model = model

    def __repr__(self) -> str:
        return f"<EntitySet {self.model.__name__}>"

    def add(self, instance: TModel) -> TModel:
        self._check_type(instance)
        self.session.add(instance)
        return instance

    def add_range(self, instances: Iterable[TModel]) -> None:
        for instance in instances:
            self.add(instance)

    def remove(self, instance: TModel) -> None:
        self._check_type(instance)
        self.session.delete(instance)

    def find(self, pk: Any) -> Optional[TModel]:
        """
        Return the instance with primary key ``pk``.

        Instances added but not yet saved are found too; otherwise the
        identity map is consulted before the database.
        """
        pk_field = self.model._meta.primary_key
        assert pk_field is not None
        pk = pk_field.to_python(pk)
        for instance in self.session.tracker.new:
            if isinstance(instance, self.model) and instance.pk == pk:
                return instance
        return self.session.get(self.model, **{pk_field.require_name(): pk})

    def all(self) -> List[TModel]:
        return self.session.all(self.model)

    def count(self) -> int:
        """
        Number of saved rows; pending additions are not counted.
        """
        return self.session.count(self.model)

    @property
    def local(self) -> List[TModel]:
        """
        Instances of this model the session currently tracks in memory.
        """
        loaded = [i for i in self.session.identity_map.instances(self.model) if i not in self.session.tracker.deleted]
        pending = [i for i in self.session.tracker.new if isinstance(i, self.model)]
        return [*loaded, *pending]  # type: ignore[list-item]

    def __iter__(self) -> Iterator[TModel]:
        return iter(self.all())

    def _check_type(self, instance: Model) -> None:
        if not isinstance(instance, self.model):
            raise TypeError(
                f"EntitySet[{self.model.__name__}] cannot track {instance.__class__.__name__} instances"
            )
