from __future__ import annotations

import json
import logging
import os
import re
from datetime import datetime, timezone

from portal.core.request_context import get_admin_id, get_request_id

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# key=value / key: value pairs whose value must never reach the log stream.
_SECRET_KEYS = ("password", "token", "secret", "access_token")
_SECRET_PATTERN = re.compile(
    r"(?P<key>\b(?:%s)\s*[:=]\s*)(?P<value>[^\s\",}]+)" % "|".join(_SECRET_KEYS),
    re.IGNORECASE,
)
_BEARER_PATTERN = re.compile(r"(?P<key>bearer\s+)(?P<value>[^\s\"]+)", re.IGNORECASE)

_EXTRA_FIELDS = (
    "endpoint",
    "method",
    "status_code",
    "duration_ms",
    "tracking_code",
    "submission_id",
    "event",
)


def mask_secrets(text: str) -> str:
    for pattern in (_SECRET_PATTERN, _BEARER_PATTERN):
        text = pattern.sub(r"\g<key>***", text)
    return text


class JsonFormatter(logging.Formatter):
    """One JSON object per line, enriched with the current request context."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.name,
            "request_id": getattr(record, "request_id", None) or get_request_id(),
            "admin_id": getattr(record, "admin_id", None) or get_admin_id(),
            "message": mask_secrets(record.getMessage()),
        }
        entry.update(
            {name: getattr(record, name) for name in _EXTRA_FIELDS if getattr(record, name, None) is not None}
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def configure_logging(level: str = LOG_LEVEL) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(level)
    # httpx logs every outbound request at INFO, including the Graph API URL.
    logging.getLogger("httpx").setLevel(logging.WARNING)
