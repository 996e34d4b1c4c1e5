import json
import logging
import os
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Iterator


def _utc_ts() -> str:
    return datetime.now(timezone.utc).isoformat()


def _level_from_env() -> int:
    raw = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    return getattr(logging, raw, logging.INFO)


def _json_enabled() -> bool:
    raw = os.getenv("LOG_JSON", "true").strip().lower()
    return raw not in {"0", "false", "no", "off"}


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": _utc_ts(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extra = getattr(record, "extra_fields", None)
        if isinstance(extra, dict):
            payload.update(extra)

        if record.exc_info:
            payload["exc_type"] = record.exc_info[0].__name__ if record.exc_info[0] else None
            payload["exc"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


class _TextFormatter(logging.Formatter):
    """Plain-text lines with event fields appended as key=value pairs."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extra = getattr(record, "extra_fields", None)
        if isinstance(extra, dict):
            pairs = " ".join(f"{k}={v}" for k, v in extra.items() if k != "event")
            if pairs:
                line = f"{line} {pairs}"
        return line


def get_logger(name: str = "artifact_cleaner") -> logging.Logger:
    """Return a configured logger for operational logs (stdout)."""
    logger = logging.getLogger(name)
    if getattr(logger, "_artifact_cleaner_configured", False):
        return logger

    logger.setLevel(_level_from_env())
    logger.propagate = False

    handler = logging.StreamHandler()
    handler.setLevel(_level_from_env())
    handler.setFormatter(_JsonFormatter() if _json_enabled() else _TextFormatter())
    logger.addHandler(handler)

    setattr(logger, "_artifact_cleaner_configured", True)
    return logger


def log_event(logger: logging.Logger, event: str, level: int = logging.INFO, **fields: Any) -> None:
    """Log a structured operational event.

    Operational events go to stdout; the per-run clean history lives in the
    SQLite store under memory/.
    """
    logger.log(level, event, extra={"extra_fields": {"event": event, **fields}})


@contextmanager
def elapsed_ms() -> Iterator[dict]:
    """Measure wall time of a block; the yielded dict gets a `latency_ms` key on exit."""
    timing: dict[str, float] = {}
    t_start = time.perf_counter()
    try:
        yield timing
    finally:
        timing["latency_ms"] = (time.perf_counter() - t_start) * 1000.0
