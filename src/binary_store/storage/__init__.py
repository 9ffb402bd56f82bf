"""Storage module for binary-store

Provides the store provider contract, the filesystem and Azure Blob
providers, and the registry that fronts the default provider.
"""

from .base import DEFAULT_CONTENT_TYPE, Content, LoadResult, StoreProvider
from .blob import DEFAULT_CONTAINER_NAME, BlobStoreProvider, resolve_connection_string
from .factory import ProviderType, create_provider, resolve_provider_type
from .file_system import DEFAULT_BUFFER_SIZE, TYPE_SUFFIX, FileSystemStoreProvider
from .registry import StoreRegistry
from .validation import (
    check_content_type,
    check_name,
    effective_content_type,
    validate_content_type,
    validate_name,
)

__all__ = [
    # Contract
    "StoreProvider",
    "LoadResult",
    "Content",
    "DEFAULT_CONTENT_TYPE",
    # Validation
    "validate_name",
    "validate_content_type",
    "check_name",
    "check_content_type",
    "effective_content_type",
    # Providers
    "FileSystemStoreProvider",
    "DEFAULT_BUFFER_SIZE",
    "TYPE_SUFFIX",
    "BlobStoreProvider",
    "DEFAULT_CONTAINER_NAME",
    "resolve_connection_string",
    # Factory and registry
    "ProviderType",
    "create_provider",
    "resolve_provider_type",
    "StoreRegistry",
]
