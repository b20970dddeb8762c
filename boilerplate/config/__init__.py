"""Environment-driven application configuration."""

from functools import lru_cache

from .loader import load_from_env
from .model import (
    Config,
    Database,
    Environment,
    HealthChecks,
    Logging,
    Server,
    Service,
    environment_name,
    to_environment,
)
from .sources import ENV_PREFIX
from .validation import validate


@lru_cache
def get_config() -> Config:
    """Return the process-wide config, loading and validating it on first use."""
    config = load_from_env()
    validate(config)
    return config


__all__ = [
    "ENV_PREFIX",
    "Config",
    "Server",
    "Logging",
    "Database",
    "Service",
    "HealthChecks",
    "Environment",
    "to_environment",
    "environment_name",
    "load_from_env",
    "validate",
    "get_config",
]
