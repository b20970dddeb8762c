"""Validation of a loaded :class:`Config`."""

from __future__ import annotations

from boilerplate.core.exceptions import ValidationError

from .model import Config

# Fixed order: structural presence first, then each section in turn.
SECTION_ORDER = ("server", "logging", "database", "service", "health_checks")


def validate(config: Config) -> None:
    """Raise the first :class:`ValidationError` found in ``config``.

    Checks stop at the first failure; errors are not accumulated.
    """
    for name in SECTION_ORDER:
        if getattr(config, name) is None:
            raise ValidationError(name, "required", f"{name} section is required")

    for name in SECTION_ORDER:
        getattr(config, name).check()


__all__ = ["validate", "SECTION_ORDER"]
