"""
Entities persisted by the task-management backend.
"""

from __future__ import annotations

import uuid

from ..core import Model, StringField, UUIDField


class Employee(Model):
    id = UUIDField(primary_key=True, default=uuid.uuid4)
    first_name = StringField()
    last_name = StringField()
    email = StringField()
    phone = StringField()

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)
