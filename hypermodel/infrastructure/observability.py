"""Structured Logging — JSON log lines carrying resource context.

Invariants:
    - Every line has timestamp, level, logger and message
    - Resource context (type, id, relationship key) and request context
      (path, method, error code) appear only when the caller passed them
    - setup_logging is idempotent: repeated app startups (tests, reloads)
      replace the handler instead of stacking duplicates

Design Decisions:
    - stdlib logging with a custom formatter, no logging dependency
    - Context travels through `extra=`; resource_context() builds it
"""

import json
import logging
from datetime import datetime, timezone

_CONTEXT_FIELDS = (
    "resource_type", "resource_id", "relationship_key",
    "error_code", "path", "method",
)

_HANDLER_NAME = "hypermodel"


def resource_context(
    resource_type: str,
    resource_id: str | None = None,
    relationship_key: str | None = None,
) -> dict:
    """`extra=` mapping for a log line about one resource."""
    context = {"resource_type": resource_type}
    if resource_id is not None:
        context["resource_id"] = resource_id
    if relationship_key is not None:
        context["relationship_key"] = relationship_key
    return context


class JSONFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, record.__dict__[key]) for key in _CONTEXT_FIELDS
            if record.__dict__.get(key) is not None
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        JSONFormatter() if fmt == "json"
        else logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
