"""JSON logging shared by the API and the CLI, plus the in-memory tail behind ``/api/logs``."""

from __future__ import annotations

import logging
from collections import deque
from datetime import datetime, timezone
from typing import Any, Optional

from pythonjsonlogger import jsonlogger

# Extras the summary job attaches to per-delivery records
DELIVERY_FIELDS = ("project_name", "cf_email", "log_id")

_CONFIGURED = False
_LOG_BUFFER: deque[dict[str, Any]] = deque(maxlen=500)


def delivery_context(project_name: str, cf_email: str, log_id: Optional[int] = None) -> dict[str, Any]:
    """``extra=`` payload for records about one summary delivery."""
    return {"project_name": project_name, "cf_email": cf_email, "log_id": log_id}


class _ServiceNameFilter(logging.Filter):
    def __init__(self, service_name: str) -> None:
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = self.service_name
        return True


class _BufferHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry: dict[str, Any] = {
                "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
                "level": record.levelname,
                "name": record.name,
                "message": record.getMessage(),
            }
            for field in DELIVERY_FIELDS:
                value = getattr(record, field, None)
                if value is not None:
                    entry[field] = value
            _LOG_BUFFER.appendleft(entry)
        except Exception:
            self.handleError(record)


def setup_logging(service_name: str = "formhub", level: str = "INFO") -> None:
    """Install the JSON stream handler and the buffer on the root logger once."""

    global _CONFIGURED
    if _CONFIGURED:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(jsonlogger.JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s %(service)s"))
    handler.addFilter(_ServiceNameFilter(service_name))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.addHandler(_BufferHandler())
    root.setLevel(level.upper())
    logging.captureWarnings(True)
    _CONFIGURED = True


def get_log_buffer(
    limit: int = 100,
    level: Optional[str] = None,
    cf_email: Optional[str] = None,
) -> list[dict[str, Any]]:
    entries = list(_LOG_BUFFER)
    if level:
        entries = [e for e in entries if e["level"] == level.upper()]
    if cf_email:
        entries = [e for e in entries if e.get("cf_email") == cf_email]
    return entries[:limit]


def clear_log_buffer() -> None:
    _LOG_BUFFER.clear()


__all__ = ["DELIVERY_FIELDS", "clear_log_buffer", "delivery_context", "get_log_buffer", "setup_logging"]
