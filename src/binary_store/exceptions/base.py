"""Base exception classes for binary-store.

Every store exception carries structured error information:
- code: Machine-readable error identifier
- message: Human-readable error description
- details: Additional context for debugging/recovery

Not-found is deliberately absent from this module. A missing object is a
normal result (``found=False`` or ``False``), never an exception.
"""

from typing import Any, Dict, Optional


class StoreError(Exception):
    """Base exception for all binary-store errors.

    Attributes:
        code: Machine-readable error code (e.g., "INVALID_NAME")
        message: Human-readable error message
        details: Optional additional context for debugging/recovery
    """

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize error with structured information.

        Args:
            code: Machine-readable error code (e.g., "INVALID_NAME")
            message: Human-readable error message
            details: Optional additional context
        """
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.code}: {self.message} (details: {self.details})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(StoreError):
    """An object name or content-type string failed its grammar.

    Always raised before any physical storage is touched.
    """

    pass


class ArgumentError(StoreError):
    """A required input is missing or unusable.

    Raised for a ``None`` name, ``None`` content or a stream that cannot be read.
    """

    pass


class ConfigurationError(StoreError):
    """A backend could not be configured.

    Covers missing or blank required settings, unresolved connection strings,
    unrecognized setting keys and non-positive buffer sizes. Only raised while
    providers are being constructed, never mid-operation.
    """

    pass


class BackendUnavailableError(StoreError):
    """The store registry could not be built.

    Raised when no providers are configured, no default provider is named or
    the default name does not resolve to a configured provider.
    """

    def __init__(
        self,
        message: str,
        code: str = "BACKEND_UNAVAILABLE",
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize registry startup error.

        The message comes first so call sites can write
        ``raise BackendUnavailableError("No store providers specified.")``.
        """
        super().__init__(code=code, message=message, details=details)
