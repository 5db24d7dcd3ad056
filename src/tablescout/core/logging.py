"""
Logging configuration.

We use a YAML logging config (`src/tablescout/config/logging.yaml`) and then apply
runtime overrides from settings:
- `app.log_level` (env: `TABLESCOUT_LOG_LEVEL`) sets the root and handler levels;
- `app.quiet_loggers` lists chatty third-party loggers (httpx logs every request URL,
  which includes the Mapbox token) that are held at WARNING regardless.
"""

from __future__ import annotations

import logging.config

from tablescout.config.settings import get_logging_config, get_settings


def configure_logging() -> None:
    """Configure the Python logging system based on packaged YAML config + settings."""
    settings = get_settings()
    config = get_logging_config()

    level = settings.app.log_level.upper()
    config.setdefault("root", {})["level"] = level
    for handler in config.get("handlers", {}).values():
        if isinstance(handler, dict) and "level" in handler:
            handler["level"] = level

    loggers = config.setdefault("loggers", {})
    for name in settings.app.quiet_loggers:
        loggers.setdefault(name, {})["level"] = "WARNING"

    logging.config.dictConfig(config)
