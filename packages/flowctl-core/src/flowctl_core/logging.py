from __future__ import annotations

import json
import logging
import sys
from typing import IO, TYPE_CHECKING

if TYPE_CHECKING:
    from flowctl_core.config import LoggingConfig

ROOT_LOGGER = "flowctl"

# Record attributes copied into JSON output when passed via ``extra=``
CONTEXT_FIELDS = ("agent", "root", "path")


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with agent context when present."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": record.created,
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key in CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = str(value)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def setup_logging(
    level: str = "WARNING",
    json_output: bool = False,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Configure and return the root flowctl logger.

    Calling it again replaces the handler installed by the previous call,
    so the level, format and stream always reflect the latest settings.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))

    for existing in list(logger.handlers):
        if getattr(existing, "_flowctl_handler", False):
            logger.removeHandler(existing)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler._flowctl_handler = True  # type: ignore[attr-defined]
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)-8s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        ))

    logger.addHandler(handler)
    return logger


def setup_from_config(
    config: LoggingConfig,
    level: str | None = None,
) -> logging.Logger:
    """Apply the ``[logging]`` section; *level* overrides its level."""
    return setup_logging(level=level or config.level, json_output=config.json)


def get_logger(name: str) -> logging.Logger:
    """Get a child logger under the flowctl namespace."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
