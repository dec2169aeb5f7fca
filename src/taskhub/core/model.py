"""
Model base classes and metadata orchestration.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Type, TypeVar

from ..utils import camel_to_snake
from .fields import AutoField, Field


class ModelConfigurationError(Exception):
    """Raised when a model class is misconfigured."""


@dataclass
class ModelOptions:
    """
    Container for model metadata calculated by :class:`ModelMeta`.
    """

    model: Type["Model"]
    table_name: str = ""
    fields: "OrderedDict[str, Field]" = field(default_factory=OrderedDict)
    primary_key: Optional[Field] = None
    implicit_primary_key: bool = False

    def add_field(self, field_obj: Field) -> None:
        if field_obj.name in self.fields:
            raise ModelConfigurationError(
                f"Duplicate field name '{field_obj.name}' on model '{self.model.__name__}'"
            )
        self.fields[field_obj.name] = field_obj
        if field_obj.primary_key:
            if self.primary_key and self.primary_key is not field_obj:
                raise ModelConfigurationError(
                    f"Multiple primary keys defined on model '{self.model.__name__}'"
                )
            self.primary_key = field_obj

    def set_primary_key(self, name: str) -> Field:
        """
        Make ``name`` the primary key.

        Only the implicit ``id`` AutoField may be replaced; an explicitly
        declared key that differs from ``name`` is a configuration error.
        """
        target = self.get_field(name)
        if self.primary_key is target:
            return target
        if self.primary_key is not None and not self.implicit_primary_key:
            raise ModelConfigurationError(
                f"Model '{self.model.__name__}' already declares primary key "
                f"'{self.primary_key.name}'; cannot use '{name}'."
            )
        if self.primary_key is not None:
            implicit = self.fields.pop(self.primary_key.require_name())
            if getattr(self.model, implicit.require_name(), None) is implicit:
                delattr(self.model, implicit.require_name())
        target.primary_key = True
        target.nullable = False
        self.primary_key = target
        self.implicit_primary_key = False
        return target

    def get_field(self, name: str) -> Field:
        try:
            return self.fields[name]
        except KeyError as exc:
            raise ModelConfigurationError(
                f"Unknown field '{name}' on model '{self.model.__name__}'"
            ) from exc

    def get_fields(self) -> Iterable[Field]:
        return self.fields.values()

    def field_for_column(self, column: str) -> Field:
        for field_obj in self.fields.values():
            if field_obj.column_name() == column:
                return field_obj
        raise ModelConfigurationError(
            f"Column '{column}' is not mapped on model '{self.model.__name__}'"
        )


TModel = TypeVar("TModel", bound="Model")


class ModelMeta(type):
    """
    Metaclass responsible for collecting fields and establishing metadata.
    """

    def __new__(mcls, name: str, bases: tuple[type, ...], attrs: Dict[str, Any]) -> "ModelMeta":
        # The base Model class itself carries no fields.
        if not bases:
            return super().__new__(mcls, name, bases, attrs)

        declared_fields: Dict[str, Field] = {}
        for attr_name, value in list(attrs.items()):
            if isinstance(value, Field):
                declared_fields[attr_name] = attrs.pop(attr_name)

        cls = super().__new__(mcls, name, bases, attrs)

        meta = getattr(cls, "Meta", None)
        table_name = getattr(meta, "table", None) or camel_to_snake(name)
        cls._meta = ModelOptions(model=cls, table_name=table_name)

        sorted_fields = sorted(declared_fields.items(), key=lambda item: item[1].creation_counter)
        for attr_name, field_obj in sorted_fields:
            field_obj.contribute_to_class(cls, attr_name)
            cls._meta.add_field(field_obj)

        if not cls._meta.primary_key:
            if "id" in cls._meta.fields:
                raise ModelConfigurationError(
                    f"Model '{cls.__name__}' defines a field named 'id' but no primary key. "
                    "Either set primary_key=True on that field or define a different name."
                )
            auto_field = AutoField()
            auto_field.contribute_to_class(cls, "id")
            cls._meta.add_field(auto_field)
            cls._meta.implicit_primary_key = True
            cls._meta.fields = OrderedDict(
                sorted(
                    cls._meta.fields.items(),
                    key=lambda item: (0 if item[0] == "id" else 1, item[1].creation_counter),
                )
            )

        return cls


class Model(metaclass=ModelMeta):
    """
    Base model providing data container functionality.
    Persistence operations are supplied by the session.
    """

    _meta: ModelOptions

    def __init__(self, **kwargs: Any) -> None:
        self._field_values: Dict[str, Any] = {}
        self._initial_state: Dict[str, Any] = {}

        unknown = set(kwargs) - set(self._meta.fields)
        if unknown:
            raise TypeError(
                f"{self.__class__.__name__}() got unexpected field(s): {', '.join(sorted(unknown))}"
            )

        for field_obj in self._meta.get_fields():
            if field_obj.name in kwargs:
                setattr(self, field_obj.name, kwargs[field_obj.name])
            elif field_obj.has_default:
                setattr(self, field_obj.name, field_obj.get_default())

        # Retain snapshot for simple dirty tracking
        self._initial_state = dict(self._field_values)

    @classmethod
    def from_row(cls: Type[TModel], row: Mapping[str, Any]) -> TModel:
        """
        Build a clean (not dirty) instance from a database row keyed by column.
        """
        instance = cls.__new__(cls)
        instance._field_values = {}
        for column in row.keys():
            field_obj = cls._meta.field_for_column(column)
            instance._field_values[field_obj.require_name()] = field_obj.to_python(row[column])
        instance._initial_state = dict(instance._field_values)
        return instance

    def __repr__(self) -> str:
        field_parts = ", ".join(
            f"{field_obj.name}={self._field_values.get(field_obj.name)!r}"
            for field_obj in self._meta.get_fields()
            if field_obj.name in self._field_values
        )
        return f"<{self.__class__.__name__} {field_parts}>"

    @property
    def pk(self) -> Any:
        if not self._meta.primary_key:
            raise ModelConfigurationError(
                f"Model '{self.__class__.__name__}' does not define a primary key."
            )
        return getattr(self, self._meta.primary_key.require_name())

    def to_dict(self) -> Dict[str, Any]:
        return {field_obj.name: getattr(self, field_obj.require_name()) for field_obj in self._meta.get_fields()}

    def changed_fields(self) -> List[str]:
        return [
            name
            for name in self._field_values
            if self._field_values.get(name) != self._initial_state.get(name)
        ]

    def is_dirty(self) -> bool:
        return bool(self.changed_fields())

    # Validation --------------------------------------------------------
    def full_clean(self) -> None:
        from ..validation import validate_instance

        validate_instance(self)

    def clean(self) -> None:
        """
        Hook for subclasses to implement model-level validation.
        """
        return None
