"""Structured logging setup.

Log records carry the service name, the configured instance name and the
correlation ID of the request being handled (set by the HTTP middleware).
"""

from __future__ import annotations

import json
import logging
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone

from netapi.config import settings

SERVICE_NAME = "netapi"

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

# Attributes present on every LogRecord; anything else was passed via extra=
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime"}


def generate_correlation_id() -> str:
    return uuid.uuid4().hex[:16]


class JSONFormatter(logging.Formatter):
    """One JSON object per line."""

    def __init__(self, instance_name: str = ""):
        super().__init__()
        self.instance_name = instance_name

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": SERVICE_NAME,
            "instance": self.instance_name,
        }
        correlation_id = correlation_id_var.get()
        if correlation_id:
            payload["correlation_id"] = correlation_id

        extra = {k: v for k, v in record.__dict__.items() if k not in _RESERVED_ATTRS}
        if extra:
            payload["extra"] = extra

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable single-line format for local development."""

    def __init__(self, instance_name: str = ""):
        super().__init__(
            fmt="%(asctime)s %(levelname)-7s [%(instance)s%(cid)s] %(name)s: %(message)s"
        )
        self.instance_name = instance_name

    def format(self, record: logging.LogRecord) -> str:
        record.instance = self.instance_name
        correlation_id = correlation_id_var.get()
        record.cid = f" {correlation_id}" if correlation_id else ""
        return super().format(record)


def setup_logging() -> None:
    """Configure the root logger from settings."""
    if settings.log_format == "text":
        formatter: logging.Formatter = TextFormatter(settings.instance_name)
    else:
        formatter = JSONFormatter(settings.instance_name)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(settings.log_level.upper())

    # docker SDK / urllib3 are noisy at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("docker").setLevel(logging.WARNING)
