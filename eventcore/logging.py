"""Logging setup with one JSON object per record.

Emitter and consumer modules pass ``extra={"event": ...}``; the formatter
lifts that into a top-level ``event`` key so dispatch logs can be filtered
by event name.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import IO

from eventcore.config import get_settings

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_FIELDS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JSONLogFormatter(logging.Formatter):
    """Render a record as ``{"ts", "level", "logger", "event", "msg", ...}``."""

    def format(self, record: logging.LogRecord) -> str:
        extras = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_FIELDS and not key.startswith("_")
        }
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": extras.pop("event", None),
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["error"] = self.formatException(record.exc_info)
        payload["extra"] = extras
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: str | None = None, stream: IO[str] | None = None) -> logging.Handler:
    """Route the root logger through a single JSON handler.

    Calling it again replaces the handler installed by the previous call and
    leaves handlers owned by others (e.g. pytest's capture) in place.
    """
    root = logging.getLogger()
    for existing in list(root.handlers):
        if isinstance(existing.formatter, JSONLogFormatter):
            root.removeHandler(existing)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONLogFormatter())
    root.addHandler(handler)
    root.setLevel((level or get_settings().log_level).upper())
    return handler
