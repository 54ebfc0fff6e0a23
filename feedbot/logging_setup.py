from __future__ import annotations

import json
import logging
import sys
from typing import Any

_configured = False

# chatty below WARNING; only let them through when feedbot itself logs at DEBUG
_NOISY_LOGGERS = ("urllib3", "requests")


def resolve_level(level: int | str) -> int:
    """Turn ``"debug"``, ``"INFO"`` or a numeric level into a logging level."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"unknown log level {level!r}")
    return resolved


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: dict[str, Any] = {
            "ts": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(json_logs: bool = False, level: int | str = logging.INFO) -> None:
    """Route all records to stdout at ``level``; later calls are no-ops.

    The engine loop runs on its own thread, so the thread name is part of
    every line.
    """
    global _configured
    if _configured:
        return

    numeric = resolve_level(level)
    handler = logging.StreamHandler(sys.stdout)
    if json_logs:
        handler.setFormatter(_JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(fmt="%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s")
        )

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(numeric)
    root.addHandler(handler)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(numeric if numeric <= logging.DEBUG else max(numeric, logging.WARNING))

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Loggers live under ``feedbot.`` so one setting can silence the package."""
    return logging.getLogger(f"feedbot.{name}")
