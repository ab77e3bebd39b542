"""Structured gameplay event logging.

Every gameplay operation (expedition start and claim, equip, consume, unlock,
rejections) is reported as one line of fields rather than prose, so server
output can be filtered by ``event=`` or ``user_id=`` without parsing
sentences.

    from parallax.logging_utils import get_logger
    log = get_logger(__name__)
    log.info(event="expedition_claimed", user_id=7, expedition_id=12, items=3)

    level=info ts=1760000000 event=expedition_claimed user_id=7 expedition_id=12 items=3 logger=parallax.services...

Environment, read on every call so tests and ``run.py --env-file`` can flip it:
    PARALLAX_LOG_LEVEL  debug | info | warn | error (default info)
    PARALLAX_LOG_JSON   1/true/yes/on switches to one JSON object per line

Fields whose value is None are dropped. ``level`` and ``ts`` are always
written by the formatter; ``logger`` defaults to the logger name. Errors go
to stderr, everything else to stdout.
"""

from __future__ import annotations

import json
import os
import sys
import time

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}
_TRUTHY = ("1", "true", "yes", "on")


def _threshold() -> int:
    return LEVELS.get(os.getenv("PARALLAX_LOG_LEVEL", "info").lower(), LEVELS["info"])


def _json_enabled() -> bool:
    return os.getenv("PARALLAX_LOG_JSON", "0").lower() in _TRUTHY


def _kv(value) -> str:
    if isinstance(value, (int, float)):
        return str(value)
    # keep one field per whitespace-separated token
    return str(value).replace(" ", "_")


def render(level: str, fields: dict) -> str:
    present = {k: v for k, v in fields.items() if v is not None}
    stamp = int(time.time())
    if _json_enabled():
        return json.dumps({**present, "level": level, "ts": stamp}, separators=(",", ":"), default=str)
    head = [f"level={level}", f"ts={stamp}"]
    return " ".join(head + [f"{k}={_kv(v)}" for k, v in present.items()])


class EventLogger:
    """Named emitter with optional fields bound to every line."""

    def __init__(self, name: str, context: dict | None = None):
        self.name = name
        self.context = dict(context or {})

    def bind(self, **context) -> "EventLogger":
        """Child logger that adds ``context`` to every event it writes."""
        return EventLogger(self.name, {**self.context, **context})

    def emit(self, level: str, **fields):
        if LEVELS[level] < _threshold():
            return
        record = {**self.context, **fields}
        record.setdefault("logger", self.name)
        stream = sys.stderr if level == "error" else sys.stdout
        print(render(level, record), file=stream)

    def debug(self, **fields):
        self.emit("debug", **fields)

    def info(self, **fields):
        self.emit("info", **fields)

    def warn(self, **fields):
        self.emit("warn", **fields)

    def error(self, **fields):
        self.emit("error", **fields)


_LOGGERS: dict = {}


def get_logger(name: str) -> EventLogger:
    if name not in _LOGGERS:
        _LOGGERS[name] = EventLogger(name)
    return _LOGGERS[name]


log = get_logger("parallax")
