"""Structured Logging — JSON formatter and setup for production observability.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (path, error_code, voice_id, port) surfaced when present
    - JSON format in production, human-readable in development
    - setup_logging() is idempotent: one gateway handler on the root logger

Design Decisions:
    - JSONFormatter on stdlib logging: no extra dependency
    - Called from the app lifespan and from the process runner
"""

import json
import logging
from datetime import datetime, timezone

_EXTRA_KEYS = (
    "path", "method", "status_code", "error_code",
    "voice_id", "operation", "upstream_status", "port",
)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_KEYS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


class _GatewayHandler(logging.StreamHandler):
    """Marker subclass so repeated setup replaces our handler only."""


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Configure logging for the application."""
    handler = _GatewayHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s — %(message)s",
        ))
    for existing in list(logging.root.handlers):
        if isinstance(existing, _GatewayHandler):
            logging.root.removeHandler(existing)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
