"""
Data-access layer of the task-management backend.
"""

from .context import ApplicationContext
from .entities import Employee

__all__ = ["ApplicationContext", "Employee"]
