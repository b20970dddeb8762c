from __future__ import annotations

import json
import sys

from boilerplate.config import load_from_env, validate
from boilerplate.config.model import Config
from boilerplate.config.types import format_duration
from boilerplate.core.exceptions import ConfigError
from boilerplate.logging import setup_logging


def summarize(config: Config) -> dict:
    """Redacted view of ``config`` suitable for printing."""
    summary = config.model_dump(mode="json", exclude={"database": {"password"}})
    for section in ("server", "health_checks"):
        values = getattr(config, section)
        for key, value in values:
            if hasattr(value, "total_seconds"):
                summary[section][key] = format_duration(value)
    summary["service"]["environment"] = str(config.service.environment)
    summary["database"]["url"] = config.database.url().render_as_string(hide_password=True)
    return summary


def main() -> None:
    try:
        config = load_from_env()
        validate(config)
        # Opens every log destination; stdout is kept free for the summary.
        setup_logging(config)
    except (ConfigError, OSError) as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(summarize(config), indent=2, sort_keys=True))
    sys.exit(0)


if __name__ == "__main__":
    main()
