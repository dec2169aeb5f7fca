"""
Core building blocks for models and metadata handling.
"""

from .fields import AutoField, Field, IntegerField, StringField, UUIDField
from .model import Model, ModelConfigurationError, ModelMeta, ModelOptions

__all__ = [
    "AutoField",
    "Field",
    "IntegerField",
    "Model",
    "ModelConfigurationError",
    "ModelMeta",
    "ModelOptions",
    "StringField",
    "UUIDField",
]
