"""Build a :class:`Config` from the process environment.

Prefix naming convention: every variable carries the application prefix
(``BOILERPLATE_`` by default). A fork should subclass :class:`Config` with its
own ``env_prefix`` (``PAYMENTS_``, ``ORDERS_`` ...) so that services sharing a
host do not read each other's settings.
"""

from __future__ import annotations

import logging
from typing import Type

from pydantic import ValidationError as PydanticValidationError

from boilerplate.core.exceptions import LoadError

from .model import Config

logger = logging.getLogger(__name__)


def _env_name(prefix: str, loc: tuple) -> str:
    return prefix + "_".join(str(part) for part in loc).upper()


def load_from_env(config_cls: Type[Config] = Config) -> Config:
    """Load configuration from prefixed environment variables.

    Unset variables leave their field at its zero value for :func:`validate`
    to report. Values that cannot be coerced to the field type raise
    :class:`LoadError`.
    """
    prefix = config_cls.model_config.get("env_prefix", "")
    try:
        config = config_cls()
    except PydanticValidationError as exc:
        failures = "; ".join(
            f"{_env_name(prefix, err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        raise LoadError(f"cannot map environment onto config: {failures}") from exc

    loaded = [name for name, value in config if value is not None]
    logger.debug("Config loaded from environment", extra={"sections": loaded})
    return config


__all__ = ["load_from_env"]
