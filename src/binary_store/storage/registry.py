"""Store registry and default-provider facade

The registry is built once during application startup and handed to whoever
needs storage. It is never mutated afterwards, so concurrent readers need no
locking.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Optional

from binary_store.config.settings import StoreSettings
from binary_store.exceptions import BackendUnavailableError, ConfigurationError
from binary_store.logger import Logger, create_logger

from .base import Content, LoadResult, StoreProvider
from .factory import create_provider


class StoreRegistry:
    """Immutable set of named store providers with one default

    The four store operations on the registry act on the default provider.
    Use ``registry["name"]`` or ``registry.get("name")`` to reach any other.

    Example:
        registry = StoreRegistry.from_settings(StoreSettings.from_env())
        registry.save("docs/readme.txt", b"hello", "text/plain")
        registry["archive"].load("docs/readme.txt")
    """

    def __init__(
        self,
        providers: Iterable[StoreProvider],
        default_name: Optional[str],
        logger: Optional[Logger] = None,
    ) -> None:
        """Build the registry.

        Args:
            providers: Configured providers, in configuration order
            default_name: Name of the provider the facade delegates to
            logger: Optional logger instance

        Raises:
            BackendUnavailableError: If there are no providers, no default name,
                or the default name is not among the providers
            ConfigurationError: If two providers share a name
        """
        self.logger = logger or create_logger(name="store-registry")

        by_name: Dict[str, StoreProvider] = {}
        for provider in providers:
            if provider is None:
                raise ConfigurationError("MISSING_PROVIDER", "The provider parameter cannot be None.")
            if provider.name in by_name:
                raise ConfigurationError(
                    "DUPLICATE_PROVIDER",
                    f"Store provider '{provider.name}' is configured more than once.",
                    {"provider": provider.name},
                )
            by_name[provider.name] = provider

        if not by_name:
            raise BackendUnavailableError("No store providers specified.", code="NO_PROVIDERS")
        if not default_name or not default_name.strip():
            raise BackendUnavailableError(
                "No default store provider specified.", code="NO_DEFAULT_PROVIDER"
            )
        if default_name not in by_name:
            raise BackendUnavailableError(
                "Default store provider was not found.",
                code="DEFAULT_PROVIDER_NOT_FOUND",
                details={"default_provider": default_name, "providers": list(by_name)},
            )

        self._providers: Mapping[str, StoreProvider] = MappingProxyType(by_name)
        self._default = by_name[default_name]

        self.logger.info(
            "StoreRegistry initialized",
            providers=",".join(by_name),
            default_provider=default_name,
        )

    @classmethod
    def from_settings(cls, settings: StoreSettings, *, logger: Optional[Logger] = None) -> "StoreRegistry":
        """Build every configured provider and the registry over them.

        Raises:
            BackendUnavailableError: If no providers or no default are configured
            ConfigurationError: If any provider cannot be built
        """
        settings.validate()
        providers = [
            create_provider(
                provider_settings,
                app_root=settings.app_root,
                connection_strings=settings.connection_strings,
                logger=logger,
            )
            for provider_settings in settings.providers
        ]
        return cls(providers, settings.default_provider, logger=logger)

    @property
    def providers(self) -> Mapping[str, StoreProvider]:
        """Read-only mapping of provider name to provider."""
        return self._providers

    @property
    def default(self) -> StoreProvider:
        return self._default

    def get(self, name: str) -> Optional[StoreProvider]:
        return self._providers.get(name)

    def __getitem__(self, name: str) -> StoreProvider:
        return self._providers[name]

    def __contains__(self, name: object) -> bool:
        return name in self._providers

    def __iter__(self) -> Iterator[str]:
        return iter(self._providers)

    def __len__(self) -> int:
        return len(self._providers)

    # Facade over the default provider

    def exists(self, name: str) -> bool:
        return self._default.exists(name)

    def delete(self, name: str) -> bool:
        return self._default.delete(name)

    def load(self, name: str) -> LoadResult:
        return self._default.load(name)

    def save(self, name: str, content: Content, content_type: Optional[str] = None) -> None:
        self._default.save(name, content, content_type)
