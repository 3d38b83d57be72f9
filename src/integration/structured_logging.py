"""Structured (JSON-line) logging for the accrual ledger.

Stdlib ``logging`` only. ``configure_logging()`` installs one stream handler on
the package logger tree and is safe to call repeatedly; ``log_event()``
emits one JSON object per line, timestamped from the record.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict

Json = Dict[str, Any]

LOGGER_ROOT = "src"

_STD_ATTRS = frozenset(vars(logging.makeLogRecord({})).keys()) | {"message", "asctime"}


class JsonLineFormatter(logging.Formatter):
    """Render a record plus its ``extra=`` fields as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Json = {
            "ts_ms": int(record.created * 1000),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for k, v in vars(record).items():
            if k not in _STD_ATTRS and not k.startswith("_"):
                payload[k] = v
        return json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str)


def configure_logging(level: str | None = None) -> logging.Logger:
    """Configure the package logger for JSONL output (stderr).

    Level from the argument, else ACCRUAL_LOG_LEVEL, else INFO.
    """
    level_name = (level or os.environ.get("ACCRUAL_LOG_LEVEL") or "INFO").strip().upper()
    lvl = getattr(logging, level_name, logging.INFO)

    logger = logging.getLogger(LOGGER_ROOT)
    if getattr(logger, "_accrual_configured", False):
        logger.setLevel(lvl)
        return logger

    handler = logging.StreamHandler()
    handler.setFormatter(JsonLineFormatter())
    logger.addHandler(handler)
    logger.setLevel(lvl)
    setattr(logger, "_accrual_configured", True)
    return logger


def log_event(logger: logging.Logger, event: str, level: int = logging.INFO, **fields: Any) -> None:
    extra: Json = {"event": event}
    extra.update(fields)
    logger.log(level, event, extra=extra)
