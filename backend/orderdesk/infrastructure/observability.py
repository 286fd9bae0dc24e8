"""Structured Logging — one JSON object per line for the order API.

Invariants:
    - Every line carries timestamp, level, logger and message
    - Invoice and procedure context (see _EXTRA_FIELDS) is copied from `extra=` when set
    - Calling setup_logging again replaces its handler, it never stacks a second one

Design Decisions:
    - LOG_FORMAT=text switches to a single-line human format for local runs
    - sqlalchemy.engine stays at WARNING: statement echo would log bound customer ids
"""

import logging
import json
from datetime import datetime, timezone

_EXTRA_FIELDS = (
    "invoice_number", "procedure", "error_code", "rule", "path",
)
_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_HANDLER_NAME = "orderdesk"


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, record.__dict__[key])
            for key in _EXTRA_FIELDS
            if record.__dict__.get(key) is not None
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the orderdesk handler on the root logger."""
    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        JSONFormatter() if fmt == "json" else logging.Formatter(_TEXT_FORMAT)
    )
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    return handler
