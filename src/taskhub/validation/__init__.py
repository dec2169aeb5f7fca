"""
Validation utilities exposed at the package level.
"""

from .errors import NON_FIELD_ERRORS, REQUIRED_MESSAGE, ValidationError
from .pipeline import validate_instance

__all__ = ["NON_FIELD_ERRORS", "REQUIRED_MESSAGE", "ValidationError", "validate_instance"]
