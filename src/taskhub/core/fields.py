"""
Field definitions and descriptors for taskhub models.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional, cast

if TYPE_CHECKING:
    from .model import Model


class FieldError(Exception):
    """Internal exception for field configuration issues."""


class Field:
    """
    Base class for model field descriptors.

    Fields manage attribute storage on model instances and retain metadata
    required for schema generation and validation.
    """

    _creation_counter = 0

    def __init__(
        self,
        *,
        primary_key: bool = False,
        unique: bool = False,
        nullable: bool = True,
        default: Any = None,
        db_type: Optional[str] = None,
        db_column: Optional[str] = None,
        validators: Optional[Iterable[Callable[[Any], None]]] = None,
    ) -> None:
        self.primary_key = primary_key
        self.unique = unique
        self.nullable = nullable and not primary_key
        self.default = default
        self.db_type = db_type
        self.db_column = db_column
        self.validators = list(validators or [])

        self.model: type["Model"] | None = None
        self.name: str | None = None
        self.creation_counter = Field._creation_counter
        Field._creation_counter += 1

    # Descriptor protocol -------------------------------------------------
    def __get__(self, instance: object | None, owner: type | None = None) -> Any:
        if instance is None:
            return self

        model_instance = cast("Model", instance)
        name = self.require_name()
        value = model_instance._field_values.get(name)
        if value is None and name not in model_instance._field_values and self.has_default:
            value = self.get_default()
            model_instance._field_values[name] = value
        return value

    def __set__(self, instance: object, value: Any) -> None:
        model_instance = cast("Model", instance)
        name = self.require_name()
        current = model_instance._field_values.get(name)

        if value is None:
            if self.primary_key and current is not None:
                raise ValueError(f"Primary key '{name}' cannot be cleared once assigned")
            if not self.nullable and not self.primary_key:
                from ..validation.errors import REQUIRED_MESSAGE, ValidationError

                raise ValidationError({name: [REQUIRED_MESSAGE]}, model=model_instance.__class__.__name__)
            model_instance._field_values[name] = None
            return

        python_value = self.to_python(value)
        if self.primary_key and current is not None and python_value != current:
            raise ValueError(f"Primary key '{name}' is immutable once assigned")
        model_instance._field_values[name] = python_value

    # Metadata helpers ----------------------------------------------------
    def contribute_to_class(self, model: type["Model"], name: str) -> None:
        """
        Attach the field to the model class as a descriptor.
        """
        self.model = model
        self.name = name
        if self.db_column is None:
            self.db_column = name
        setattr(model, name, self)

    def require_name(self) -> str:
        if self.name is None:
            raise FieldError("Field name is not set.")
        return self.name

    def column_name(self) -> str:
        if self.db_column:
            return self.db_column
        return self.require_name()

    # Conversion / validation ---------------------------------------------
    @property
    def has_default(self) -> bool:
        return self.default is not None

    def get_default(self) -> Any:
        if callable(self.default):
            return self.default()
        return self.default

    def to_python(self, value: Any) -> Any:
        return value

    def get_db_prep_value(self, value: Any) -> Any:
        """
        Convert a Python value into a parameter the driver can bind.
        """
        return value

    def run_validators(self, value: Any) -> None:
        for validator in self.validators:
            validator(value)


class AutoField(Field):
    """
    Auto-incrementing integer key added to models that declare none.
    """

    def __init__(self) -> None:
        super().__init__(primary_key=True, nullable=False, db_type="INTEGER")

    def to_python(self, value: Any) -> int | None:
        if value is None:
            return value
        try:
            return int(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid value '{value}' for AutoField") from exc


class IntegerField(Field):
    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault("db_type", "INTEGER")
        super().__init__(**kwargs)

    def to_python(self, value: Any) -> int | None:
        if value is None:
            return value
        try:
            return int(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid integer value '{value}'") from exc


class StringField(Field):
    def __init__(self, *, max_length: int | None = None, **kwargs: Any) -> None:
        kwargs.setdefault("db_type", "TEXT")
        super().__init__(**kwargs)
        self.max_length = max_length

    def to_python(self, value: Any) -> str | None:
        if value is None:
            return value
        result = str(value)
        if self.max_length and len(result) > self.max_length:
            field_name = self.require_name()
            raise ValueError(f"Value for field '{field_name}' exceeds max_length {self.max_length}")
        return result


class UUIDField(Field):
    """
    UUID stored in its canonical 36 character text form.
    """

    def __init__(self, **kwargs: Any) -> None:
        kwargs.setdefault("db_type", "TEXT")
        super().__init__(**kwargs)

    def to_python(self, value: Any) -> uuid.UUID | None:
        if value is None or isinstance(value, uuid.UUID):
            return value
        try:
            if isinstance(value, bytes):
                return uuid.UUID(bytes=value)
            return uuid.UUID(str(value))
        except ValueError as exc:
            raise ValueError(f"Invalid UUID value '{value}' for field '{self.name}'") from exc

    def get_db_prep_value(self, value: Any) -> str | None:
        value = self.to_python(value)
        if value is None:
            return None
        return str(value)
