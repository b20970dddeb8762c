"""Predicate checks used by the config sections.

Every helper raises :class:`ValidationError` on the first violation so callers
can chain them and stop at the first failure.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Iterable

from boilerplate.core.exceptions import ValidationError

from .types import format_duration


def _display(value: Any) -> str:
    if isinstance(value, timedelta):
        return format_duration(value)
    return str(value)


def required(value: Any, field: str) -> None:
    """Reject ``None``, blank strings, empty collections and zero values."""
    if isinstance(value, str):
        value = value.strip()
    if value is None or not value:
        raise ValidationError(field, "required", f"{field} is required")


def minimum(value: Any, floor: Any, field: str) -> None:
    if value < floor:
        raise ValidationError(
            field, "min", f"{field} must be at least {_display(floor)}, got {_display(value)}"
        )


def maximum(value: Any, ceiling: Any, field: str) -> None:
    if value > ceiling:
        raise ValidationError(
            field, "max", f"{field} must be at most {_display(ceiling)}, got {_display(value)}"
        )


def one_of(value: str, choices: Iterable[str], field: str) -> None:
    allowed = tuple(choices)
    if value not in allowed:
        raise ValidationError(
            field, "oneof", f"{field} must be one of {', '.join(allowed)}, got {value!r}"
        )


__all__ = ["required", "minimum", "maximum", "one_of"]
