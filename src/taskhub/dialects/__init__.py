"""
SQL dialect strategies.
"""

from .base import Dialect
from .sqlite import SQLiteDialect

__all__ = ["Dialect", "SQLiteDialect"]
