"""Exceptions raised by binary-store.

All exceptions include structured error information (code, message, details).

Usage:
    from binary_store.exceptions import (
        StoreError,
        ValidationError,
        ArgumentError,
        ConfigurationError,
        BackendUnavailableError,
    )

Faults reported by the physical medium (``OSError`` from the filesystem,
``azure.core.exceptions.AzureError`` from blob storage) are not wrapped and
reach the caller unchanged.
"""

from binary_store.exceptions.base import (
    ArgumentError,
    BackendUnavailableError,
    ConfigurationError,
    StoreError,
    ValidationError,
)

__all__ = [
    "StoreError",
    "ValidationError",
    "ArgumentError",
    "ConfigurationError",
    "BackendUnavailableError",
]
