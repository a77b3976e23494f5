"""Logging setup for the translation coach.

All module loggers live under the "beonyeok" namespace and share one
stderr handler installed on first use. Records are JSON lines by default;
BEONYEOK_LOG_FORMAT=text switches to a human-readable line with the same
extra fields appended. BEONYEOK_LOG_LEVEL sets the level.
"""
import logging
import json
import os
import sys
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator

ROOT_LOGGER = "beonyeok"

# Keys accepted through `extra=` and copied onto the output line
EXTRA_KEYS = (
    "component", "detail", "duration_ms", "count", "endpoint",
    "status_code", "model", "user_id",
)


def _extras(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: getattr(record, key)
        for key in EXTRA_KEYS
        if getattr(record, key, None) is not None
    }


class JSONFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
            **_extras(record),
        }
        if record.exc_info and record.exc_info[1]:
            entry["error"] = str(record.exc_info[1])
            entry["error_type"] = type(record.exc_info[1]).__name__
        return json.dumps(entry, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):

    def __init__(self):
        super().__init__("%(asctime)s [%(levelname)s] %(name)s: %(message)s", datefmt="%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = " ".join(f"{k}={v}" for k, v in _extras(record).items())
        return f"{line} {extras}" if extras else line


def configure(level: str = None, fmt: str = None) -> logging.Logger:
    """Install the shared handler on the namespace logger (idempotent)."""
    root = logging.getLogger(ROOT_LOGGER)
    if root.handlers:
        return root
    level = (level or os.environ.get("BEONYEOK_LOG_LEVEL", "INFO")).upper()
    fmt = fmt or os.environ.get("BEONYEOK_LOG_FORMAT", "json")

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(TextFormatter() if fmt == "text" else JSONFormatter())
    root.addHandler(handler)
    root.setLevel(getattr(logging, level, logging.INFO))
    root.propagate = False
    return root


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Logger for `name`, which should sit under "beonyeok." to reach the handler.

        logger = get_logger("beonyeok.llm")
        logger.warning("Provider failed", extra={"component": "llm", "model": "gpt-4o-mini"})
    """
    configure()
    return logging.getLogger(name)


@contextmanager
def timed() -> Iterator[Dict[str, int]]:
    """Measure a block; the yielded dict holds duration_ms once the block exits."""
    result = {"duration_ms": 0}
    start = time.monotonic()
    try:
        yield result
    finally:
        result["duration_ms"] = round((time.monotonic() - start) * 1000)
