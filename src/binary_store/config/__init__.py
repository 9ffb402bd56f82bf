"""Configuration module for binary-store

Typed registry settings loaded from the environment (with .env support) or
from a dictionary.

Example:
    from binary_store.config import StoreSettings

    settings = StoreSettings.from_env(prefix="BINARY_STORE")
    settings.validate()
"""

from binary_store.config.env_loader import EnvLoader
from binary_store.config.settings import (
    DEFAULT_PREFIX,
    ProviderParameters,
    ProviderSettings,
    StoreSettings,
    normalize_key,
)

__all__ = [
    "EnvLoader",
    "DEFAULT_PREFIX",
    "ProviderParameters",
    "ProviderSettings",
    "StoreSettings",
    "normalize_key",
]
