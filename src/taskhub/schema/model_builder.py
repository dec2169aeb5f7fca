"""
Fluent configuration of model metadata.

A data context hands a :class:`ModelBuilder` to its ``on_model_creating``
callback once per context class::

    def on_model_creating(self, builder):
        builder.entity(Employee, lambda e: (
            e.has_key("id"),
            e.property("email").is_required(),
        ))

Every call mutates the target model's ``_meta`` in place.
"""

from __future__ import annotations

from collections import OrderedDict
from typing import Callable, Generic, List, Optional, Type, TypeVar

from ..core.fields import Field, StringField
from ..core.model import Model, ModelConfigurationError
from ..utils import get_logger

TModel = TypeVar("TModel", bound=Model)


class PropertyBuilder:
    """
    Configures a single mapped field.
    """

    def __init__(self, model: Type[Model], field: Field) -> None:
        self.model = model
        self.field = field

    def is_required(self, required: bool = True) -> "PropertyBuilder":
        if not required and self.field.primary_key:
            raise ModelConfigurationError(
                f"Key '{self.field.name}' on '{self.model.__name__}' cannot be optional."
            )
        self.field.nullable = not required
        return self

    def has_max_length(self, max_length: int) -> "PropertyBuilder":
        if not isinstance(self.field, StringField):
            raise ModelConfigurationError(
                f"Field '{self.field.name}' on '{self.model.__name__}' is not a string field."
            )
        if max_length <= 0:
            raise ModelConfigurationError("max_length must be positive.")
        self.field.max_length = max_length
        return self

    def has_column_name(self, column: str) -> "PropertyBuilder":
        self.field.db_column = column
        return self


class EntityTypeBuilder(Generic[TModel]):
    """
    Configures key, table and properties of one model.
    """

    def __init__(self, model: Type[TModel]) -> None:
        self.model = model

    def has_key(self, name: str) -> "EntityTypeBuilder[TModel]":
        self.model._meta.set_primary_key(name)
        return self

    def to_table(self, table_name: str) -> "EntityTypeBuilder[TModel]":
        self.model._meta.table_name = table_name
        return self

    def property(self, name: str) -> PropertyBuilder:
        return PropertyBuilder(self.model, self.model._meta.get_field(name))


class ModelBuilder:
    """
    Collects the models a data context maps and applies their configuration.
    """

    def __init__(self) -> None:
        self._entities: "OrderedDict[Type[Model], EntityTypeBuilder]" = OrderedDict()
        self.logger = get_logger("schema.model_builder")

    def entity(
        self,
        model: Type[TModel],
        configure: Optional[Callable[[EntityTypeBuilder[TModel]], object]] = None,
    ) -> EntityTypeBuilder[TModel]:
        if not (isinstance(model, type) and issubclass(model, Model)):
            raise ModelConfigurationError(f"{model!r} is not a Model subclass.")
        entity_builder = self._entities.get(model)
        if entity_builder is None:
            entity_builder = EntityTypeBuilder(model)
            self._entities[model] = entity_builder
        if configure is not None:
            configure(entity_builder)
            self.logger.debug("Configured entity %s", model.__name__)
        return entity_builder

    @property
    def models(self) -> List[Type[Model]]:
        return list(self._entities)
