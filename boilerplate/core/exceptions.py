"""Base exceptions for the configuration layer."""

from __future__ import annotations


class DomainError(Exception):
    """Base class for all domain level exceptions."""


class ConfigError(DomainError):
    """Base class for configuration failures that must abort startup."""


class LoadError(ConfigError):
    """Raised when the environment cannot be read or mapped onto the config."""


class ValidationError(ConfigError):
    """Raised when a loaded config breaks a validation rule.

    ``field`` is the dotted path of the offending value (``"database"``,
    ``"health_checks.timeout"``) and ``rule`` names the violated check:
    ``required``, ``min``, ``max`` or ``oneof``.
    """

    def __init__(self, field: str, rule: str, message: str | None = None) -> None:
        self.field = field
        self.rule = rule
        super().__init__(message or f"{field}: failed '{rule}' check")


# Alias to keep a generic name for error type hints
Error = DomainError

__all__ = ["DomainError", "ConfigError", "LoadError", "ValidationError", "Error"]
