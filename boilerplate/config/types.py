"""Field types shared by the config sections.

Environment values arrive as plain strings; these annotated types coerce them
into the shapes the sections declare.
"""

from __future__ import annotations

import re
from datetime import timedelta
from typing import Annotated, Any, List

from pydantic import BeforeValidator, Field

# Unit -> microseconds, the resolution of ``timedelta``.
_DURATION_UNITS = {
    "ns": 0.001,
    "us": 1,
    "µs": 1,
    "μs": 1,
    "ms": 1_000,
    "s": 1_000_000,
    "m": 60_000_000,
    "h": 3_600_000_000,
}
_DURATION_PART = r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)"
_DURATION_RE = re.compile(rf"(?:{_DURATION_PART})+")
_DURATION_PART_RE = re.compile(_DURATION_PART)


def parse_duration(value: Any) -> timedelta:
    """Parse durations written like ``300ms``, ``1.5h`` or ``2m30s``.

    A bare ``0`` is accepted, any other number needs a unit. Numbers that are
    not strings are taken as seconds so sections can be built directly in
    code.
    """
    if isinstance(value, timedelta):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if value < 0:
            raise ValueError("duration must not be negative")
        return timedelta(seconds=value)
    if not isinstance(value, str):
        raise ValueError(f"invalid duration {value!r}")

    text = value.strip()
    negative = text.startswith("-")
    if text[:1] in ("-", "+"):
        text = text[1:]
    if text == "0":
        return timedelta(0)
    if negative:
        raise ValueError("duration must not be negative")
    if not _DURATION_RE.fullmatch(text):
        raise ValueError(f"invalid duration {value!r}")

    micros = 0.0
    for number, unit in _DURATION_PART_RE.findall(text):
        micros += float(number) * _DURATION_UNITS[unit]
    return timedelta(microseconds=micros)


def format_duration(value: timedelta) -> str:
    """Render ``value`` in the same notation :func:`parse_duration` reads."""
    micros = (value.days * 86_400 + value.seconds) * 1_000_000 + value.microseconds
    if micros % 1_000_000 == 0:
        return f"{micros // 1_000_000}s"
    if micros % 1_000 == 0:
        return f"{micros // 1_000}ms"
    return f"{micros}us"


def split_list(value: Any) -> Any:
    """Split comma separated strings; anything else is left to pydantic."""
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


Duration = Annotated[timedelta, BeforeValidator(parse_duration)]
UInt = Annotated[int, Field(ge=0)]
StrList = Annotated[List[str], BeforeValidator(split_list)]

__all__ = [
    "Duration",
    "UInt",
    "StrList",
    "parse_duration",
    "format_duration",
    "split_list",
]
