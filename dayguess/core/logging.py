"""
Logging for the game backend.

Every record on the ``dayguess`` logger is correlated with the HTTP request
that produced it and carries game fields (player_id, event_type, ...) when the
caller set them. Production writes one JSON object per line; other
environments write a single readable line.
"""

import json
import logging
import os
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Dict, Optional, Tuple

LOGGER_NAME = "dayguess"

# Record attributes copied into formatted output when present.
EVENT_FIELDS: Tuple[str, ...] = ("player_id", "event_type", "error_code", "key", "date", "entry_id")

MAX_FIELD_LENGTH = 500

_LATENCY_BUCKETS = ((10, "<10ms"), (100, "10-100ms"), (500, "100-500ms"), (1000, "500-1000ms"))

request_id_ctx_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def get_request_id(default: Optional[str] = None) -> Optional[str]:
    rid = request_id_ctx_var.get()
    return default if rid is None else rid


def latency_bucket_ms(latency_ms: Optional[float]) -> str:
    """Coarse latency label for request logs."""
    if latency_ms is None:
        return "unknown"
    for bound, label in _LATENCY_BUCKETS:
        if latency_ms < bound:
            return label
    return ">=1000ms"


def _utc_timestamp(record: logging.LogRecord) -> str:
    stamp = datetime.fromtimestamp(record.created, timezone.utc)
    return stamp.strftime("%Y-%m-%dT%H:%M:%S.") + f"{stamp.microsecond // 1000:03d}Z"


def _event_fields(record: logging.LogRecord) -> Dict[str, object]:
    return {name: getattr(record, name) for name in EVENT_FIELDS if getattr(record, name, None) is not None}


class RequestContextFilter(logging.Filter):
    """Fill ``record.request_id`` from the request context unless the caller set it."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = get_request_id()
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": _utc_timestamp(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        payload.update(_event_fields(record))
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, ensure_ascii=False)


class PrettyFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        parts = [_utc_timestamp(record), record.levelname, f"[{LOGGER_NAME}]"]
        rid = getattr(record, "request_id", None)
        if rid:
            parts.append(f"[rid={rid}]")
        parts.append(record.getMessage())
        parts.extend(f"{name}={value}" for name, value in _event_fields(record).items())
        line = " ".join(parts)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure_logging(env: str = "development", level: int = logging.INFO) -> None:
    """Install a single stdout handler on the package logger. Idempotent."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter() if env.lower() == "production" else PrettyFormatter())
    handler.addFilter(RequestContextFilter())

    logger = get_logger()
    logger.setLevel(level)
    logger.handlers = [handler]
    logger.propagate = True

    for noisy in ("uvicorn", "uvicorn.error"):
        logging.getLogger(noisy).propagate = False


def _truncate(value, limit: int = MAX_FIELD_LENGTH) -> str:
    try:
        text = str(value)
    except Exception:
        return "<unserializable>"
    return text if len(text) <= limit else text[:limit] + "...<truncated>"


def log_event(
    level: str,
    msg: str,
    *,
    player_id: Optional[str] = None,
    event_type: Optional[str] = None,
    error_code: Optional[str] = None,
    extra: Optional[Dict[str, object]] = None,
) -> None:
    """Emit a structured game event. Extra values are stringified and truncated."""
    logger = get_logger()
    if not logger.handlers:
        # scripts and tests that never went through main
        configure_logging(os.getenv("ENV", "development"))

    fields: Dict[str, object] = {"request_id": get_request_id(), "player_id": player_id}
    if event_type:
        fields["event_type"] = event_type
    if error_code:
        fields["error_code"] = error_code
    for name, value in (extra or {}).items():
        fields[name] = _truncate(value)

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logger.log(numeric_level if isinstance(numeric_level, int) else logging.INFO, msg, extra=fields)
