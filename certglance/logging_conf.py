
import json
import logging
from typing import Any

from .settings import Settings

# champs passés via extra= par le serveur et les décodeurs
SUMMARY_FIELDS = ("source", "kind", "subject", "reason")

_PLAIN_FORMAT = "%(levelname)s %(name)s: %(message)s"


class _SummaryFields(logging.Filter):
    """Append the summary context of a record to its plain-text message."""

    def filter(self, record: logging.LogRecord) -> bool:
        ctx = [f"{k}={getattr(record, k)}" for k in SUMMARY_FIELDS if getattr(record, k, None) is not None]
        record.summary_ctx = (" [" + " ".join(ctx) + "]") if ctx else ""
        return True


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for k in SUMMARY_FIELDS:
            v = getattr(record, k, None)
            if v is not None:
                payload[k] = v
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(settings: Settings, json_mode: bool | None = None) -> logging.Logger:
    """
    Configure the ``certglance`` logger tree once.

    Third-party loggers (fastmcp, mcp) keep their own configuration. The
    handler writes to stderr: stdout carries the MCP stdio protocol.
    """
    logger = logging.getLogger("certglance")
    if getattr(logger, "_certglance_configured", False):
        return logger

    level = getattr(logging, settings.LOG_LEVEL, logging.INFO)
    logger.setLevel(level)

    if json_mode is None:
        json_mode = settings.LOG_JSON

    handler = logging.StreamHandler()
    handler.setLevel(level)
    if json_mode:
        handler.setFormatter(_JsonFormatter())
    else:
        handler.addFilter(_SummaryFields())
        handler.setFormatter(logging.Formatter(_PLAIN_FORMAT + "%(summary_ctx)s"))
    logger.addHandler(handler)

    setattr(logger, "_certglance_configured", True)
    return logger
