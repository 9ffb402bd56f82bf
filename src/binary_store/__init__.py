"""binary-store - Uniform binary object storage.

Callers save, load, check and delete named binary objects without knowing
which backend holds them:
- storage: provider contract, filesystem and Azure Blob providers, registry
- config: typed registry settings from the environment or a dictionary
- exceptions: structured exception classes
- logger: structured logging used by every provider
"""

__version__ = "1.0.0"

from binary_store.logger import (
    Logger,
    StructuredLogger,
    create_logger,
    get_logger,
)

from binary_store.exceptions import (
    ArgumentError,
    BackendUnavailableError,
    ConfigurationError,
    StoreError,
    ValidationError,
)

from binary_store.config import (
    EnvLoader,
    ProviderSettings,
    StoreSettings,
)

from binary_store.storage import (
    BlobStoreProvider,
    FileSystemStoreProvider,
    LoadResult,
    StoreProvider,
    StoreRegistry,
    create_provider,
    validate_content_type,
    validate_name,
)

__all__ = [
    "__version__",
    # Logger
    "Logger",
    "StructuredLogger",
    "create_logger",
    "get_logger",
    # Exceptions
    "StoreError",
    "ValidationError",
    "ArgumentError",
    "ConfigurationError",
    "BackendUnavailableError",
    # Config
    "EnvLoader",
    "ProviderSettings",
    "StoreSettings",
    # Storage
    "StoreProvider",
    "LoadResult",
    "FileSystemStoreProvider",
    "BlobStoreProvider",
    "StoreRegistry",
    "create_provider",
    "validate_name",
    "validate_content_type",
]
