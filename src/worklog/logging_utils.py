from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Iterable

PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Context the report script attaches through ``extra=``.
REPORT_FIELDS = ("input_path", "as_of", "month")


class JsonFormatter(logging.Formatter):
    """One JSON object per record; only the named extra fields are copied."""

    def __init__(self, extra_fields: Iterable[str] = REPORT_FIELDS) -> None:
        super().__init__()
        self.extra_fields = tuple(extra_fields)

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: dict[str, Any] = {
            "time": created.isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (name, getattr(record, name))
            for name in self.extra_fields
            if hasattr(record, name)
        )
        if record.exc_info:
            payload["error"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def setup_logging(
    level: str | int = logging.INFO,
    *,
    json_output: bool = False,
) -> None:
    """Route every logger through a single stderr handler on the root logger."""
    handler = logging.StreamHandler()
    if json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level.upper() if isinstance(level, str) else level)
