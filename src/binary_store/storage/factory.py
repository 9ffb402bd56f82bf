"""Factory for building store providers from settings.

Example:
    settings = ProviderSettings(name="local", type="filesystem",
                                parameters={"folderName": "/srv/blobs"})
    provider = create_provider(settings)
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Literal, Mapping, Optional, Union

from binary_store.config.settings import ProviderSettings
from binary_store.exceptions import ConfigurationError, StoreError
from binary_store.logger import Logger

from .base import StoreProvider
from .blob import BlobStoreProvider
from .file_system import FileSystemStoreProvider

ProviderType = Literal["filesystem", "blob"]

# Accepted spellings of each provider type (compared lower-case)
PROVIDER_TYPE_ALIASES: Dict[str, ProviderType] = {
    "filesystem": "filesystem",
    "file": "filesystem",
    "fs": "filesystem",
    "local": "filesystem",
    "blob": "blob",
    "azure": "blob",
    "azureblob": "blob",
}


def resolve_provider_type(value: Optional[str]) -> ProviderType:
    """Map a configured type string to its canonical provider type.

    Raises:
        ConfigurationError: If the type is missing or unknown
    """
    key = (value or "").strip().lower().replace("-", "").replace("_", "")
    if key not in PROVIDER_TYPE_ALIASES:
        raise ConfigurationError(
            "UNKNOWN_PROVIDER_TYPE",
            f"Unknown store provider type: {value!r}. "
            f"Must be one of: {', '.join(sorted(PROVIDER_TYPE_ALIASES))}",
            {"type": value},
        )
    return PROVIDER_TYPE_ALIASES[key]


def create_provider(
    settings: ProviderSettings,
    *,
    app_root: Optional[Union[str, Path]] = None,
    connection_strings: Optional[Mapping[str, str]] = None,
    logger: Optional[Logger] = None,
) -> StoreProvider:
    """Create a store provider from its settings.

    Args:
        settings: Provider name, type and raw parameters
        app_root: Base for "~/" folder names (filesystem providers)
        connection_strings: Named connection strings (blob providers)
        logger: Optional logger passed to the provider

    Returns:
        StoreProvider implementation

    Raises:
        ConfigurationError: If the settings cannot produce a provider
    """
    settings.validate()
    provider_type = resolve_provider_type(settings.type)

    try:
        if provider_type == "filesystem":
            return FileSystemStoreProvider.from_parameters(
                settings.name,
                settings.parameters,
                app_root=app_root,
                logger=logger,
            )
        return BlobStoreProvider.from_parameters(
            settings.name,
            settings.parameters,
            connection_strings=connection_strings,
            logger=logger,
        )
    except StoreError:
        raise
    except Exception as e:
        raise ConfigurationError(
            "PROVIDER_INITIALIZATION_FAILED",
            str(e),
            {"provider": settings.name, "type": provider_type},
        ) from e
