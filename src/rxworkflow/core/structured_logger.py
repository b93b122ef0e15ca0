"""
Structured logging for workflow audit events.

Use cases emit one JSON line per event (``transition_applied``,
``pickup_completed`` ...). ``configure_logging`` attaches the project
handler in either JSON or plain text form.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .config import LoggingSettings

LOGGER_NAME = "rxworkflow"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def _json_default(value: Any) -> Any:
    # datetimes and str-enums show up in audit payloads
    if isinstance(value, datetime):
        return value.isoformat()
    if hasattr(value, "value"):
        return value.value
    return str(value)


class StructuredLogger:
    """Writes ``{"event": ..., **fields}`` payloads to a stdlib logger."""

    def __init__(self, name: str, level: Optional[int] = None):
        self.logger = logging.getLogger(name)
        if level is not None:
            self.logger.setLevel(level)

    def log(self, level: str, event: str, **fields: Any) -> None:
        numeric_level = _LEVELS.get(level.lower(), logging.INFO)
        if not self.logger.isEnabledFor(numeric_level):
            return
        payload = {"event": event, **fields}
        self.logger.log(numeric_level, json.dumps(payload, default=_json_default))

    def debug(self, event: str, **fields: Any) -> None:
        self.log("debug", event, **fields)

    def info(self, event: str, **fields: Any) -> None:
        self.log("info", event, **fields)

    def warning(self, event: str, **fields: Any) -> None:
        self.log("warning", event, **fields)

    def error(self, event: str, **fields: Any) -> None:
        self.log("error", event, **fields)


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with the source location and any traceback."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "source": f"{record.module}:{record.lineno}",
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=_json_default)


def configure_logging(settings: Optional[LoggingSettings] = None) -> logging.Logger:
    """Attach a stdout handler to the project logger using the configured format."""
    settings = settings or LoggingSettings()
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(settings.level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        if settings.format == "json":
            handler.setFormatter(JSONFormatter())
        else:
            handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)

    return logger


def get_logger(name: str = LOGGER_NAME) -> StructuredLogger:
    return StructuredLogger(name)
