"""
Logger interface for binary-store.

Store providers and the registry log through this contract so that callers
can plug in their own implementation.
"""

from abc import ABC, abstractmethod
from typing import Any


class Logger(ABC):
    """Abstract base class for the logging interface.

    Every method accepts a message plus arbitrary key-value pairs, which
    implementations attach to the log entry (object name, provider, size...).

    Example:
        logger.debug("Object saved", provider="local", object_name="docs/readme.txt")
    """

    @abstractmethod
    def debug(self, message: str, **kwargs: Any) -> None:
        """Log a debug message."""
        pass

    @abstractmethod
    def info(self, message: str, **kwargs: Any) -> None:
        """Log an info message."""
        pass

    @abstractmethod
    def warning(self, message: str, **kwargs: Any) -> None:
        """Log a warning message."""
        pass

    @abstractmethod
    def error(self, message: str, **kwargs: Any) -> None:
        """Log an error message."""
        pass

    @abstractmethod
    def critical(self, message: str, **kwargs: Any) -> None:
        """Log a critical message."""
        pass

    @abstractmethod
    def get_session_id(self) -> str:
        """Get the unique session identifier for this logger instance."""
        pass
