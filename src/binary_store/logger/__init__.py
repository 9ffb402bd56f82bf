"""
binary-store logger module.

Usage:
    from binary_store.logger import Logger, get_logger, create_logger

    logger = get_logger("file-store")
    logger.info("Provider initialized", provider="local")

    logger = create_logger(
        name="blob-store",
        level=logging.DEBUG,
        json_format=True,
        log_file="/var/log/blob-store.log",
    )

Environment Variables:
    {PREFIX}_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    {PREFIX}_LOG_FILE: Optional file path for log output
    {PREFIX}_LOG_JSON: Set to "true" for JSON output format

    Where {PREFIX} is derived from the logger name (e.g., FILE_STORE for "file-store")
"""

import logging
import os
from typing import Optional

from .interface import Logger
from .structured_logger import JsonFormatter, StructuredLogger, TextFormatter


def _get_env_prefix(name: str) -> str:
    """Convert logger name to environment variable prefix.

    Examples:
        "file-store" -> "FILE_STORE"
        "store-registry" -> "STORE_REGISTRY"
    """
    return name.upper().replace("-", "_").replace(".", "_")


def _level_from_env(value: Optional[str]) -> int:
    """Accept a level name ("debug") or number ("10"); anything else is INFO."""
    if not value:
        return logging.INFO
    value = value.strip()
    if value.isdigit():
        return int(value)
    level = logging.getLevelName(value.upper())
    return level if isinstance(level, int) else logging.INFO


def create_logger(
    name: str = "binary-store",
    level: Optional[int] = None,
    log_file: Optional[str] = None,
    json_format: Optional[bool] = None,
) -> Logger:
    """Create a StructuredLogger, filling unset options from the environment.

    Options left as None come from {PREFIX}_LOG_LEVEL, {PREFIX}_LOG_FILE and
    {PREFIX}_LOG_JSON, where PREFIX is derived from ``name``.

    Args:
        name: Logger name (e.g., "file-store", "blob-store")
        level: Logging level (defaults to INFO or env var)
        log_file: Optional file path for log output
        json_format: If True, output logs as JSON
    """
    env = {
        key: os.environ.get(f"{_get_env_prefix(name)}_LOG_{key}")
        for key in ("LEVEL", "FILE", "JSON")
    }
    return StructuredLogger(
        name=name,
        level=_level_from_env(env["LEVEL"]) if level is None else level,
        log_file=env["FILE"] if log_file is None else log_file,
        json_format=(env["JSON"] or "").lower() == "true" if json_format is None else json_format,
    )


def get_logger(name: str = "binary-store") -> Logger:
    """Get a logger configured purely from environment variables."""
    return create_logger(name=name)


__all__ = [
    "Logger",
    "StructuredLogger",
    "JsonFormatter",
    "TextFormatter",
    "create_logger",
    "get_logger",
]
