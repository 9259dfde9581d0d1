from __future__ import annotations

import json
import logging
import os
import sys
import time
from datetime import datetime, timezone
from typing import IO, Any

LOGGER_NAME = "currency_converter"
# The menu owns stdout, so only warnings and up reach stderr by default.
DEFAULT_LEVEL = "WARNING"

_configured = False


def _utc_timestamp(created: float) -> str:
    return datetime.fromtimestamp(created, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


class JsonFormatter(logging.Formatter):
    """One JSON object per line.

    ``log_event`` attaches ``event`` and ``fields``; plain ``logger.info`` calls
    fall back to the rendered message as the event name.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": _utc_timestamp(record.created),
            "level": record.levelname,
            "logger": record.name,
            "event": getattr(record, "event", None) or record.getMessage(),
        }
        payload.update(getattr(record, "fields", None) or {})
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, ensure_ascii=True)


def _resolve_level(name: str | None) -> int:
    level = logging.getLevelName((name or DEFAULT_LEVEL).upper())
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(
    level: str | None = None, *, stream: IO[str] | None = None, force: bool = False
) -> None:
    global _configured  # noqa: PLW0603
    if _configured and not force:
        return
    resolved = _resolve_level(level or os.getenv("LOG_LEVEL"))
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JsonFormatter())
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolved)
    logger.handlers = [handler]
    logger.propagate = False
    _configured = True


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(name)


def _clean_fields(fields: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in fields.items() if value is not None}


def log_event(
    logger: logging.Logger, event: str, *, level: int = logging.INFO, **fields: Any
) -> None:
    logger.log(level, event, extra={"event": event, "fields": _clean_fields(fields)})


def log_exception(logger: logging.Logger, event: str, **fields: Any) -> None:
    logger.exception(event, extra={"event": event, "fields": _clean_fields(fields)})


def monotonic_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)
