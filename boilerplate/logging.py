"""Application-wide logging configuration.

Provides a JSON formatter with a minimal, consistent set of fields:
- timestamp (UTC ISO8601), level, logger, service, environment, message
- Supports structured extras via `logger.info(msg, extra={...})` which are
  merged into the JSON.

Destinations come from the validated ``logging`` config section: ``stderr``,
``stdout`` or a file path per entry.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List

from boilerplate.config.model import Config, environment_name

_RESERVED = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
}

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class _JsonFormatter(logging.Formatter):
    """One-line JSON log formatter with stable keys and UTC timestamps."""

    def __init__(self, service: str, environment: str) -> None:
        super().__init__()
        self.service = service
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        base: Dict[str, Any] = {
            "timestamp": dt.strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
            "level": record.levelname,
            "logger": record.name,
            "service": self.service,
            "environment": self.environment,
            "message": record.getMessage(),
        }
        # Merge any structured extras (from `extra=`)
        for k, v in record.__dict__.items():
            if k in _RESERVED:
                continue
            # Don't overwrite base keys unless explicitly provided in extra
            if k not in base:
                base[k] = v
        if record.exc_info:
            etype = getattr(record.exc_info[0], "__name__", str(record.exc_info[0]))
            base["error"] = {
                "class": etype,
                "message": str(record.exc_info[1])[:500],
            }
        return json.dumps(base, ensure_ascii=False, default=repr)


def level_for(name: str) -> int:
    return _LEVELS.get(name.strip().lower(), logging.INFO)


def _handlers(outputs: List[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []
    try:
        for output in outputs:
            if output == "stderr":
                handlers.append(logging.StreamHandler(sys.stderr))
            elif output == "stdout":
                handlers.append(logging.StreamHandler(sys.stdout))
            else:
                handlers.append(logging.FileHandler(output, encoding="utf-8"))
    except OSError:
        for handler in handlers:
            handler.close()
        raise
    return handlers


def setup_logging(config: Config) -> None:
    """Configure root logger to output one-line JSON logs.

    Expects a validated config; the logging and service sections must be set.
    """

    section = config.logging
    service = config.service
    formatter = _JsonFormatter(
        service=service.name if service else "",
        environment=environment_name(service.environment if service else None),
    )

    # Open every destination before touching the root logger so a bad path
    # leaves the current handlers in place.
    handlers = _handlers(section.outputs if section else ["stderr"])

    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(level_for(section.level if section else "info"))


__all__ = ["setup_logging", "level_for"]
