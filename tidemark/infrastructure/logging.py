"""
Centralized Logging

Architectural Intent:
- Log output goes to stderr so stdout carries only presenter output
- One configuration entry point for the CLI flags (--verbose, --debug,
  --json-logs) and the config file's log_level name

Design Decisions:
- Levels are accepted as logging constants or names ("info", "DEBUG");
  unknown names fall back to WARNING
- httpx logs every request at INFO; it is held at WARNING unless tidemark
  runs at DEBUG, so --verbose shows rollback progress without request noise
- Records may carry service_name / deployment_id via ``extra=``; the JSON
  formatter emits them as top-level keys
"""

import json
import logging
import sys
from datetime import datetime, UTC
from typing import Union

CONTEXT_FIELDS = ("service_name", "deployment_id", "event_type")
QUIET_LIBRARIES = ("httpx", "httpcore")


class JSONFormatter(logging.Formatter):
    """One JSON object per line, with tidemark context fields when present."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_entry[name] = value
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    return value if isinstance(value, int) else logging.WARNING


def configure_logging(
    level: Union[int, str] = logging.WARNING,
    json_format: bool = False,
) -> int:
    """Configure the ``tidemark`` logger and return the effective level."""
    resolved = _resolve_level(level)

    logger = logging.getLogger("tidemark")
    logger.setLevel(resolved)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(resolved)
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
    logger.addHandler(handler)

    library_level = logging.DEBUG if resolved <= logging.DEBUG else logging.WARNING
    for name in QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(library_level)

    return resolved
