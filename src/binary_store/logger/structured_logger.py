"""
Structured logger with JSON output and file support.

Wraps a stdlib ``logging.Logger`` so that keyword arguments passed to the
log methods end up as fields on the record (text suffix or JSON keys).
"""

import json
import logging
import sys
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .interface import Logger

# Attributes every LogRecord already has; never treated as extra fields.
RESERVED_ATTRS = frozenset(
    {
        "args", "asctime", "created", "exc_info", "exc_text", "filename",
        "funcName", "levelname", "levelno", "lineno", "module",
        "msecs", "message", "msg", "name", "pathname", "process",
        "processName", "relativeCreated", "stack_info", "thread",
        "threadName", "taskName",
    }
)

TEXT_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] [session:%(session_id)s] %(message)s"


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in RESERVED_ATTRS and key != "session_id"
    }


class JsonFormatter(logging.Formatter):
    """Formats log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }

        session_id = getattr(record, "session_id", None)
        if session_id:
            log_data["session_id"] = str(session_id)

        log_data.update(_extra_fields(record))
        return json.dumps(log_data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable formatter that appends extra fields as ``key=value``."""

    def format(self, record: logging.LogRecord) -> str:
        s = super().format(record)

        extra_args = _extra_fields(record)
        if extra_args:
            s += " " + " ".join(f"{k}={v}" for k, v in extra_args.items())

        return s


class StructuredLogger(Logger):
    """Logger implementation with text or JSON output and optional file copy.

    Example:
        logger = StructuredLogger(name="file-store")
        logger.info("Provider initialized", provider="local", root="/srv/blobs")

        logger = StructuredLogger(
            name="blob-store",
            json_format=True,
            log_file="/var/log/blob-store.log",
        )
    """

    def __init__(
        self,
        name: str = "binary-store",
        level: int = logging.INFO,
        log_file: Optional[str] = None,
        json_format: bool = False,
    ):
        """Initialize the structured logger.

        Args:
            name: Logger name (e.g., "file-store", "blob-store", "store-registry")
            level: Logging level (logging.DEBUG, logging.INFO, etc.)
            log_file: Optional file path for log output
            json_format: If True, output logs as JSON; otherwise use text format
        """
        self._name = name
        self._session_id = str(uuid.uuid4())[:8]
        self._logger = logging.getLogger(name)
        self._logger.setLevel(level)
        self._logger.propagate = False
        # Re-creating a logger with the same name must not duplicate output
        self._logger.handlers.clear()

        formatter = JsonFormatter() if json_format else TextFormatter(TEXT_FORMAT)
        for handler in self._open_handlers(log_file):
            handler.setFormatter(formatter)
            self._logger.addHandler(handler)

    @staticmethod
    def _open_handlers(log_file: Optional[str]) -> List[logging.Handler]:
        handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
        if log_file:
            try:
                handlers.append(logging.FileHandler(log_file))
            except OSError as e:
                # Console output still works without the file
                print(f"Failed to setup log file {log_file}: {e}", file=sys.stderr)
        return handlers

    @property
    def name(self) -> str:
        return self._name

    def get_session_id(self) -> str:
        return self._session_id

    def _log(self, level: int, message: str, **kwargs: Any) -> None:
        extra: Dict[str, Any] = {"session_id": self._session_id}

        for k, v in kwargs.items():
            # LogRecord refuses to overwrite its own attributes
            extra[f"_{k}" if k in RESERVED_ATTRS else k] = v

        self._logger.log(level, message, extra=extra)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, **kwargs)

    def critical(self, message: str, **kwargs: Any) -> None:
        self._log(logging.CRITICAL, message, **kwargs)
