"""Structured Logging — JSON formatter and setup for production observability.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Engine extras (action, task_id, user_id, total, duration_ms, ...) surfaced when present
    - JSON format in production, human-readable in development
    - setup_logging() is idempotent: calling it again replaces the tracker handler
      instead of stacking a second one

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - SQL statement logging belongs to the engine's echo flag, so sqlalchemy.engine
      stays at WARNING here
"""

import logging
import json
from datetime import datetime, timezone

# Keys services pass via `extra=`; anything else on the record is ignored
ENGINE_EXTRAS = (
    "action", "task_id", "user_id", "comment_id", "fields",
    "total", "count", "limit", "offset", "duration_ms",
    "error_code", "path",
)

_HANDLER_NAME = "tracker"


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in ENGINE_EXTRAS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the tracker handler on the root logger; returns it."""
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    for existing in list(logging.root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logging.root.removeHandler(existing)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    return handler
