"""Redaction helpers for DSNs and logged statement parameters."""

from __future__ import annotations

from typing import Any, Iterable, Sequence

REDACTED_VALUE = "***"

_SENSITIVE_KEY_TOKENS = (
    "password",
    "passwd",
    "pwd",
    "secret",
    "token",
    "apikey",
    "api_key",
    "private_key",
)

# Personal data held by employee records; never written to logs.
_PERSONAL_KEY_TOKENS = (
    "email",
    "phone",
)

_SENSITIVE_VALUE_TOKENS = (
    "password",
    "secret",
    "token",
    "bearer",
)


def _compact(value: str) -> str:
    return "".join(ch for ch in value if ch.isalnum())


def is_sensitive_key(key: str) -> bool:
    normalized = key.lower()
    compact = _compact(normalized)
    for token in _SENSITIVE_KEY_TOKENS + _PERSONAL_KEY_TOKENS:
        if token in normalized or _compact(token) in compact:
            return True
    return False


def is_sensitive_value(value: str) -> bool:
    normalized = value.lower()
    return any(token in normalized for token in _SENSITIVE_VALUE_TOKENS)


def redact_query_params(query: dict[str, str]) -> dict[str, str]:
    return {key: REDACTED_VALUE if is_sensitive_key(key) else val for key, val in query.items()}


def redact_value(value: Any, *, key: str | None = None) -> Any:
    if key is not None and is_sensitive_key(key):
        return REDACTED_VALUE
    if isinstance(value, str) and is_sensitive_value(value):
        return REDACTED_VALUE
    return value


def redact_params(params: Iterable[Any], columns: Sequence[str] | None = None) -> list[Any]:
    """
    Redact statement parameters for logging.

    When ``columns`` is given it is matched positionally against ``params``
    so values bound to personal or credential columns are hidden regardless
    of their content.
    """
    values = list(params)
    if columns is None:
        return [redact_value(value) for value in values]
    keys: list[str | None] = list(columns) + [None] * (len(values) - len(columns))
    return [redact_value(value, key=key) for value, key in zip(values, keys)]
