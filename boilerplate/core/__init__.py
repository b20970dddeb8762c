"""Core library exposing the shared exception hierarchy."""

from .exceptions import ConfigError, DomainError, Error, LoadError, ValidationError

__all__ = [
    "DomainError",
    "ConfigError",
    "LoadError",
    "ValidationError",
    "Error",
]
