"""Dataclass-based settings for the store registry

Describes which providers to build, which one is the default, and where the
named connection strings and application root come from.

Two sources are supported:

Environment (prefix defaults to BINARY_STORE):
    BINARY_STORE_PROVIDERS=local,cloud
    BINARY_STORE_DEFAULT_PROVIDER=local
    BINARY_STORE_PROVIDER_LOCAL_TYPE=filesystem
    BINARY_STORE_PROVIDER_LOCAL_FOLDER_NAME=~/data/blobs
    BINARY_STORE_PROVIDER_CLOUD_TYPE=blob
    BINARY_STORE_PROVIDER_CLOUD_CONNECTION_STRING_NAME=DevStorageAccount
    BINARY_STORE_CONNECTION_STRING_DEVSTORAGEACCOUNT=UseDevelopmentStorage=true
    BINARY_STORE_APP_ROOT=/srv/app

Dictionary (e.g. parsed from JSON):
    {
        "providers": [
            {"name": "local", "type": "filesystem", "folderName": "~/data/blobs"},
            {"name": "cloud", "type": "blob", "connectionStringName": "DevStorageAccount"}
        ],
        "defaultProvider": "local",
        "connectionStrings": {"DevStorageAccount": "UseDevelopmentStorage=true"},
        "appRoot": "/srv/app"
    }

Parameter keys are matched case-insensitively with "_" and "-" ignored, so
FOLDER_NAME, folder-name and folderName are the same key.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from binary_store.config.env_loader import EnvLoader
from binary_store.exceptions import BackendUnavailableError, ConfigurationError

DEFAULT_PREFIX = "BINARY_STORE"


def normalize_key(key: str) -> str:
    """Fold a configuration key to its comparison form.

    Examples:
        "folderName" -> "foldername"
        "FOLDER_NAME" -> "foldername"
        "connection-string-name" -> "connectionstringname"
    """
    return key.replace("_", "").replace("-", "").lower()


def _env_token(name: str) -> str:
    return name.upper().replace("-", "_").replace(".", "_")


class ProviderParameters:
    """Case-insensitive view over a provider's raw parameters.

    Tracks which keys were consumed so that leftovers can be rejected.

    Example:
        params = ProviderParameters("local", {"folderName": "/srv", "bufferSize": "4096"})
        folder = params.pop("folderName")
        size = params.pop_int("bufferSize", 65536)
        params.ensure_consumed()
    """

    def __init__(self, provider_name: str, parameters: Optional[Mapping[str, Any]] = None):
        self.provider_name = provider_name
        self._remaining: Dict[str, tuple[str, Any]] = {}
        for key, value in (parameters or {}).items():
            folded = normalize_key(key)
            if folded in self._remaining:
                raise ConfigurationError(
                    "DUPLICATE_PARAMETER",
                    f"Configuration attribute specified more than once: {key}",
                    {"provider": provider_name, "key": key},
                )
            self._remaining[folded] = (key, value)

    def pop(self, key: str, default: Optional[str] = None) -> Optional[str]:
        entry = self._remaining.pop(normalize_key(key), None)
        if entry is None or entry[1] is None:
            return default
        return str(entry[1])

    def pop_int(self, key: str, default: int) -> int:
        raw = self.pop(key)
        if raw is None or raw.strip() == "":
            return default
        try:
            return int(raw)
        except ValueError as exc:
            raise ConfigurationError(
                "INVALID_CONFIGURATION",
                f"Configuration attribute \"{key}\" must be an integer, got {raw!r}",
                {"provider": self.provider_name, "key": key},
            ) from exc

    def ensure_consumed(self) -> None:
        """Raise if any parameter was not recognized by the provider."""
        if self._remaining:
            keys = [original for original, _ in self._remaining.values()]
            raise ConfigurationError(
                "UNRECOGNIZED_PARAMETERS",
                "Unrecognized configuration attributes found: " + ", ".join(keys),
                {"provider": self.provider_name, "keys": keys},
            )


@dataclass
class ProviderSettings:
    """Configuration of one named provider

    Attributes:
        name: Registry key of the provider
        type: Provider type ("filesystem", "blob" or an accepted alias)
        parameters: Raw provider parameters (folderName, bufferSize, ...)
    """

    name: str
    type: str = ""
    parameters: Dict[str, str] = field(default_factory=dict)

    def validate(self) -> None:
        if not self.name or not self.name.strip():
            raise ConfigurationError("MISSING_PROVIDER_NAME", "Store provider name cannot be empty.")
        if not self.type or not self.type.strip():
            raise ConfigurationError(
                "MISSING_PROVIDER_TYPE",
                f"No type specified for store provider '{self.name}'.",
                {"provider": self.name},
            )


@dataclass
class StoreSettings:
    """Complete registry configuration

    Attributes:
        providers: Ordered provider configurations
        default_provider: Name of the provider the facade delegates to
        connection_strings: Named-secret store used by blob providers
        app_root: Base for "~/" relative folder names
        prefix: Environment variable prefix used
    """

    providers: List[ProviderSettings] = field(default_factory=list)
    default_provider: Optional[str] = None
    connection_strings: Dict[str, str] = field(default_factory=dict)
    app_root: Path = field(default_factory=Path.cwd)
    prefix: str = DEFAULT_PREFIX

    def __post_init__(self) -> None:
        self.app_root = Path(self.app_root)

    @classmethod
    def from_env(
        cls,
        prefix: str = DEFAULT_PREFIX,
        env_file: Optional[Path | str] = None,
        overrides: Optional[Mapping[str, str]] = None,
    ) -> "StoreSettings":
        """Load settings from environment variables (and an optional .env file)

        Environment variables:
            {prefix}_PROVIDERS: Comma-separated provider names, in order
            {prefix}_DEFAULT_PROVIDER: Default provider name
            {prefix}_PROVIDER_{NAME}_TYPE: Provider type
            {prefix}_PROVIDER_{NAME}_{PARAM}: Provider parameter
            {prefix}_CONNECTION_STRING_{NAME}: Named connection string
            {prefix}_APP_ROOT: Application root for "~/" paths
        """
        values = {
            key.upper(): value
            for key, value in EnvLoader(env_file).load_prefixed(prefix, overrides).items()
        }

        names = [n.strip() for n in values.get("PROVIDERS", "").split(",") if n.strip()]

        # Longest names first so PROVIDER_A_ does not swallow PROVIDER_A_B_ keys
        claimed: set[str] = set()
        by_name: Dict[str, ProviderSettings] = {}
        for name in sorted(names, key=lambda n: len(_env_token(n)), reverse=True):
            marker = f"PROVIDER_{_env_token(name)}_"
            provider = ProviderSettings(name=name)
            for key, value in values.items():
                if key in claimed or not key.startswith(marker):
                    continue
                claimed.add(key)
                suffix = key[len(marker):]
                if suffix == "TYPE":
                    provider.type = value
                else:
                    provider.parameters[suffix] = value
            by_name[name] = provider

        connection_strings = {
            key[len("CONNECTION_STRING_"):]: value
            for key, value in values.items()
            if key.startswith("CONNECTION_STRING_")
        }

        app_root = values.get("APP_ROOT")
        return cls(
            providers=[by_name[name] for name in names],
            default_provider=values.get("DEFAULT_PROVIDER") or None,
            connection_strings=connection_strings,
            app_root=Path(app_root) if app_root else Path.cwd(),
            prefix=prefix,
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], prefix: str = DEFAULT_PREFIX) -> "StoreSettings":
        """Load settings from a JSON-like dictionary (see module docstring)."""
        top = {normalize_key(k): v for k, v in data.items()}

        providers: List[ProviderSettings] = []
        for entry in top.get("providers") or []:
            raw = dict(entry)
            name = raw.pop("name", "")
            ptype = raw.pop("type", "")
            providers.append(
                ProviderSettings(
                    name=str(name),
                    type=str(ptype),
                    parameters={k: str(v) for k, v in raw.items() if v is not None},
                )
            )

        app_root = top.get("approot")
        return cls(
            providers=providers,
            default_provider=top.get("defaultprovider") or None,
            connection_strings={
                str(k): str(v) for k, v in (top.get("connectionstrings") or {}).items()
            },
            app_root=Path(app_root) if app_root else Path.cwd(),
            prefix=prefix,
        )

    def get_provider(self, name: str) -> Optional[ProviderSettings]:
        for provider in self.providers:
            if provider.name == name:
                return provider
        return None

    def validate(self) -> None:
        """Check the settings can produce a registry

        Raises:
            BackendUnavailableError: If no providers or no default are configured
            ConfigurationError: If a provider lacks a name or type
        """
        if not self.providers:
            raise BackendUnavailableError("No store providers specified.", code="NO_PROVIDERS")
        if not self.default_provider or not self.default_provider.strip():
            raise BackendUnavailableError(
                "No default store provider specified.", code="NO_DEFAULT_PROVIDER"
            )
        for provider in self.providers:
            provider.validate()
