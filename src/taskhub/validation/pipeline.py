"""
Validation run against every pending instance before a flush.
"""

from __future__ import annotations

from typing import Dict, List

from ..core.fields import AutoField, Field
from ..core.model import Model
from .errors import NON_FIELD_ERRORS, REQUIRED_MESSAGE, ValidationError


def validate_instance(instance: Model) -> None:
    errors: Dict[str, List[str]] = {}

    for field in instance._meta.get_fields():
        field_name = field.require_name()
        value = instance._field_values.get(field_name)
        try:
            _validate_field(field, value)
        except ValidationError as exc:
            _merge_errors(errors, exc.errors)
        except ValueError as exc:
            _add_error(errors, field_name, str(exc))

    try:
        instance.clean()
    except ValidationError as exc:
        _merge_errors(errors, exc.errors)
    except ValueError as exc:
        _add_error(errors, NON_FIELD_ERRORS, str(exc))

    if errors:
        raise ValidationError(errors, model=instance.__class__.__name__)


def _validate_field(field: Field, value) -> None:
    if value is None:
        # Database assigns the value on insert.
        if isinstance(field, AutoField):
            return
        if not field.nullable:
            raise ValidationError({field.require_name(): [REQUIRED_MESSAGE]})
        return
    field.run_validators(value)


def _add_error(errors: Dict[str, List[str]], field: str, message: str) -> None:
    errors.setdefault(field, []).append(message)


def _merge_errors(target: Dict[str, List[str]], source: Dict[str, List[str]]) -> None:
    for field, messages in source.items():
        target.setdefault(field, []).extend(messages)
