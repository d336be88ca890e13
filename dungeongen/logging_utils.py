"""Minimal structured logging helper.

Emits ``key=value`` pairs (or one JSON object per line) with a timestamp and
level. Generation code logs events, not prose, so lines stay easy to grep.

Usage:
    from dungeongen.logging_utils import get_logger
    log = get_logger("layout.rooms")
    log.debug(event="room_placed", index=0, x=3, y=4)

Non-numeric values are str()'d with spaces replaced. Reserved keys: level, ts.
Level and format come from ``DUNGEONGEN_LOG_LEVEL`` / ``DUNGEONGEN_LOG_JSON``
and are re-read by ``configure()``.
"""

from __future__ import annotations

import json
import os
import sys
import time

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}

_state = {"level": 20, "json": False}


def configure(level: str | None = None, json_mode: bool | None = None) -> None:
    """(Re)load level and output format, explicit arguments winning over the environment."""
    env_level = os.getenv("DUNGEONGEN_LOG_LEVEL", "info").lower()
    _state["level"] = LEVELS.get((level or env_level).lower(), 20)
    if json_mode is None:
        json_mode = os.getenv("DUNGEONGEN_LOG_JSON", "0").lower() in ("1", "true", "yes", "on")
    _state["json"] = bool(json_mode)


def _format(level: str, **fields) -> str:
    if _state["json"]:
        rec = {k: v for k, v in fields.items() if v is not None}
        rec["level"] = level
        rec["ts"] = int(time.time())
        return json.dumps(rec, separators=(",", ":"), default=str)
    parts = [f"level={level}", f"ts={int(time.time())}"]
    for k, v in fields.items():
        if v is None:
            continue
        if isinstance(v, (int, float)):
            parts.append(f"{k}={v}")
        else:
            parts.append(f"{k}={str(v).replace(' ', '_')}")
    return " ".join(parts)


class _Logger:
    def __init__(self, name: str):
        self.name = name

    def enabled_for(self, lvl: str) -> bool:
        return LEVELS[lvl] >= _state["level"]

    def _log(self, lvl: str, **fields):
        if not self.enabled_for(lvl):
            return
        fields.setdefault("logger", self.name)
        print(_format(lvl, **fields), file=sys.stderr if lvl == "error" else sys.stdout)

    def debug(self, **fields):
        self._log("debug", **fields)

    def info(self, **fields):
        self._log("info", **fields)

    def warn(self, **fields):
        self._log("warn", **fields)

    def error(self, **fields):
        self._log("error", **fields)


_LOGGER_CACHE: dict[str, _Logger] = {}


def get_logger(name: str) -> _Logger:
    if name not in _LOGGER_CACHE:
        _LOGGER_CACHE[name] = _Logger(name)
    return _LOGGER_CACHE[name]


configure()

log = get_logger("dungeongen")
