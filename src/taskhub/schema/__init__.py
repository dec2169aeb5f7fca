"""
Schema utilities: DDL generation and fluent model configuration.
"""

from .builder import SchemaBuilder
from .model_builder import EntityTypeBuilder, ModelBuilder, PropertyBuilder

__all__ = ["EntityTypeBuilder", "ModelBuilder", "PropertyBuilder", "SchemaBuilder"]
