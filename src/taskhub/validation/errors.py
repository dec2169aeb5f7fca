"""
Constraint violation error raised before rows are written.
"""

from __future__ import annotations

from typing import Dict, List, Mapping

NON_FIELD_ERRORS = "__all__"
REQUIRED_MESSAGE = "This field is required."


class ValidationError(Exception):
    """
    Aggregated constraint violations keyed by field name.

    ``model`` names the entity the violations belong to when the error was
    raised while saving tracked changes.
    """

    def __init__(self, errors: Mapping[str, List[str]], *, model: str | None = None) -> None:
        self.errors: Dict[str, List[str]] = {key: list(messages) for key, messages in errors.items()}
        self.model = model
        super().__init__(self._format_message())

    @property
    def fields(self) -> List[str]:
        return [name for name in self.errors if name != NON_FIELD_ERRORS]

    def _format_message(self) -> str:
        segments = []
        for field_name, messages in self.errors.items():
            prefix = field_name if field_name != NON_FIELD_ERRORS else "non-field"
            segments.append(f"{prefix}: {'; '.join(messages)}")
        message = "; ".join(segments)
        if self.model:
            return f"{self.model}: {message}"
        return message
