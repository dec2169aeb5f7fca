"""
Application data context for the task-management backend.
"""

from __future__ import annotations

from ..persistence.context import DataContext
from ..persistence.entity_set import EntitySet
from ..schema.model_builder import EntityTypeBuilder, ModelBuilder
from .entities import Employee


def _configure_employee(builder: EntityTypeBuilder[Employee]) -> None:
    builder.has_key("id")
    builder.property("first_name").is_required()
    builder.property("last_name").is_required()
    builder.property("email").is_required()
    builder.property("phone").is_required()


class ApplicationContext(DataContext):
    """
    Exposes the employees set and implements the unit of work.

    Application code should depend on :class:`taskhub.persistence.UnitOfWork`
    for committing and only reach for the context to track entities.
    """

    def on_model_creating(self, builder: ModelBuilder) -> None:
        super().on_model_creating(builder)
        builder.entity(Employee, _configure_employee)

    @property
    def employees(self) -> EntitySet[Employee]:
        return self.set(Employee)
