"""Logging for the English learning API.

Records go to stderr, one JSON object per line by default, or as plain text
with ENGLEARN_LOG_FORMAT=text. ENGLEARN_LOG_LEVEL picks the level.

Callers relay user-owned API keys, so anything that looks like a key or a
bearer token is masked before a record is written.
"""
import logging
import json
import os
import re
import sys
from datetime import datetime, timezone
from typing import Any

EXTRA_FIELDS = (
    "component", "detail", "duration_ms", "count", "endpoint",
    "status_code", "model", "host",
)

_SECRET = re.compile(r"(Bearer\s+)\S+|\bsk-[A-Za-z0-9_\-]{4,}", re.IGNORECASE)
MASK = "***"


def redact(text: str) -> str:
    return _SECRET.sub(lambda m: (m.group(1) or "") + MASK, text)


def _extras(record: logging.LogRecord) -> dict:
    found = {}
    for key in EXTRA_FIELDS:
        val = getattr(record, key, None)
        if val is not None:
            found[key] = redact(val) if isinstance(val, str) else val
    return found


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, timezone.utc)
        entry: dict[str, Any] = {
            "ts": ts.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": redact(record.getMessage()),
        }
        if record.exc_info and record.exc_info[1]:
            entry["error"] = redact(str(record.exc_info[1]))
            entry["error_type"] = type(record.exc_info[1]).__name__
        entry.update(_extras(record))
        return json.dumps(entry, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    """``HH:MM:SS [LEVEL] name: msg key=value ...``"""

    def __init__(self):
        super().__init__("%(asctime)s [%(levelname)s] %(name)s: %(message)s", datefmt="%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        line = redact(super().format(record))
        extras = _extras(record)
        if extras:
            line += " " + " ".join(f"{k}={v}" for k, v in extras.items())
        return line


def get_logger(name: str = "englearn") -> logging.Logger:
    """Return the named logger, attaching the stderr handler on first use."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        level = os.environ.get("ENGLEARN_LOG_LEVEL", "INFO").upper()
        logger.setLevel(getattr(logging, level, logging.INFO))

        handler = logging.StreamHandler(sys.stderr)
        if os.environ.get("ENGLEARN_LOG_FORMAT", "json") == "text":
            handler.setFormatter(TextFormatter())
        else:
            handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
        logger.propagate = False
    return logger
