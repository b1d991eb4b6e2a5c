"""Minimal structured logging helper.

Emits one line per event as key=value pairs (or compact JSON) with a
timestamp, level and logger name. Generation stages report soft shortfalls
through it; nothing in the generator raises for them.

Usage:
    from generated_maps.logging_utils import get_logger
    log = get_logger("dungeon")
    log.info(event="rooms_short", requested=12, placed=9)

Environment:
    MAPS_LOG_LEVEL  debug | info | warn | error (default: info)
    MAPS_LOG_JSON   1/true/yes/on switches to JSON lines

Both are read on every call so tests can flip them with monkeypatch.
Reserved keys: level, ts, logger.
"""

from __future__ import annotations

import json
import os
import sys
import time
from typing import Dict, Optional, TextIO

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}


def current_level() -> int:
    return LEVELS.get(os.getenv("MAPS_LOG_LEVEL", "info").lower(), LEVELS["info"])


def json_mode() -> bool:
    return os.getenv("MAPS_LOG_JSON", "0").lower() in ("1", "true", "yes", "on")


def format_record(level: str, **fields) -> str:
    ts = int(time.time())
    if json_mode():
        rec = {k: v for k, v in fields.items() if v is not None}
        rec["level"] = level
        rec["ts"] = ts
        return json.dumps(rec, separators=(",", ":"), default=str)
    parts = [f"level={level}", f"ts={ts}"]
    for k, v in fields.items():
        if v is None:
            continue
        if isinstance(v, (int, float)):
            parts.append(f"{k}={v}")
        else:
            parts.append(f"{k}={str(v).replace(' ', '_')}")
    return " ".join(parts)


class StructuredLogger:
    """Line logger. ``stderr=True`` keeps every level off stdout, for
    libraries whose callers print payloads (json, ascii maps) there."""

    def __init__(self, name: str, stream: Optional[TextIO] = None, stderr: bool = False):
        self.name = name
        self.stream = stream
        self.stderr = stderr

    def _log(self, level: str, **fields) -> None:
        if LEVELS[level] < current_level():
            return
        fields.setdefault("logger", self.name)
        out = self.stream or (sys.stderr if self.stderr or level == "error" else sys.stdout)
        print(format_record(level, **fields), file=out)

    def debug(self, **fields) -> None:
        self._log("debug", **fields)

    def info(self, **fields) -> None:
        self._log("info", **fields)

    def warn(self, **fields) -> None:
        self._log("warn", **fields)

    def error(self, **fields) -> None:
        self._log("error", **fields)


_LOGGER_CACHE: Dict[str, StructuredLogger] = {}


def get_logger(name: str, stderr: bool = False) -> StructuredLogger:
    if name not in _LOGGER_CACHE:
        _LOGGER_CACHE[name] = StructuredLogger(name, stderr=stderr)
    elif stderr:
        _LOGGER_CACHE[name].stderr = True
    return _LOGGER_CACHE[name]


log = get_logger("generated_maps")
