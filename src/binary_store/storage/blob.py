"""Azure Blob Storage store provider

Each object is a block blob in one container; the object name is the blob
key and the content type is the blob's Content-Type property. The service's
"not found" answers (missing blob or missing container) become the contract's
``found=False`` / ``False`` results here and nowhere else. Every other
``AzureError`` reaches the caller unchanged.
"""

from __future__ import annotations

import threading
from typing import Any, Mapping, Optional

from azure.core.exceptions import AzureError, ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import BlobServiceClient, ContainerClient, ContentSettings

from binary_store.config.settings import ProviderParameters, normalize_key
from binary_store.exceptions import ConfigurationError
from binary_store.logger import Logger, create_logger

from .base import DEFAULT_CONTENT_TYPE, Content, LoadResult, StoreProvider, is_buffer
from .validation import check_name, effective_content_type

DEFAULT_CONTAINER_NAME = "blob-store-provider"


def resolve_connection_string(
    connection_string_name: str, connection_strings: Optional[Mapping[str, str]]
) -> str:
    """Look up a named connection string

    The exact name is tried first, then a case-insensitive match, so
    "DevStorageAccount" finds an entry loaded from
    BINARY_STORE_CONNECTION_STRING_DEVSTORAGEACCOUNT.

    Raises:
        ConfigurationError: If the name is unknown or its value is blank
    """
    strings = connection_strings or {}
    value = strings.get(connection_string_name)
    if value is None:
        wanted = normalize_key(connection_string_name)
        for key, candidate in strings.items():
            if normalize_key(key) == wanted:
                value = candidate
                break

    if value is None or not value.strip():
        raise ConfigurationError(
            "MISSING_CONNECTION_STRING",
            "Connection string cannot be blank.",
            {"connection_string_name": connection_string_name},
        )
    return value


class BlobStoreProvider(StoreProvider):
    """Store provider backed by an Azure Blob Storage container

    The container is created on the first save if it does not exist yet.
    Reads against a missing container simply find nothing.

    Example:
        store = BlobStoreProvider(
            "cloud",
            "DevStorageAccount",
            connection_strings={"DevStorageAccount": "UseDevelopmentStorage=true"},
        )
        store.save("img.bin", b"\\x00\\x01")
    """

    def __init__(
        self,
        name: str,
        connection_string_name: str,
        container_name: str = DEFAULT_CONTAINER_NAME,
        default_content_type: str = DEFAULT_CONTENT_TYPE,
        connection_strings: Optional[Mapping[str, str]] = None,
        service_client: Optional[BlobServiceClient] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        """Initialize the provider.

        Args:
            name: Provider name used in the registry
            connection_string_name: Key into ``connection_strings``
            container_name: Container holding the objects
            default_content_type: Content type stored when none is supplied
            connection_strings: Named connection strings
            service_client: Pre-built client; skips connection string parsing
            logger: Optional logger instance

        Raises:
            ConfigurationError: If any setting is missing or invalid
        """
        self.name = name
        self.logger = logger or create_logger(name="blob-store")

        if not connection_string_name or not connection_string_name.strip():
            raise ConfigurationError(
                "MISSING_CONNECTION_STRING_NAME",
                "Connection string name cannot be null or empty.",
                {"provider": name},
            )
        if not container_name or not container_name.strip():
            raise ConfigurationError(
                "INVALID_CONTAINER_NAME", "Invalid container name.", {"provider": name}
            )
        if not default_content_type or not default_content_type.strip():
            raise ConfigurationError(
                "INVALID_DEFAULT_CONTENT_TYPE", "Invalid default content type.", {"provider": name}
            )

        self.connection_string_name = connection_string_name
        self.container_name = container_name
        self.default_content_type = default_content_type
        connection_string = resolve_connection_string(connection_string_name, connection_strings)

        if service_client is None:
            try:
                service_client = BlobServiceClient.from_connection_string(connection_string)
            except ValueError as e:
                raise ConfigurationError(
                    "INVALID_CONNECTION_STRING",
                    "Invalid storage connection string.",
                    {"provider": name, "connection_string_name": connection_string_name},
                ) from e

        self._service = service_client
        self._container: ContainerClient = service_client.get_container_client(container_name)
        self._container_ready = False
        self._container_lock = threading.Lock()

        self.logger.info(
            "BlobStoreProvider initialized",
            provider=name,
            container=container_name,
            connection_string_name=connection_string_name,
        )

    @classmethod
    def from_parameters(
        cls,
        name: str,
        parameters: Optional[Mapping[str, Any]] = None,
        connection_strings: Optional[Mapping[str, str]] = None,
        service_client: Optional[BlobServiceClient] = None,
        logger: Optional[Logger] = None,
    ) -> "BlobStoreProvider":
        """Build a provider from raw configuration attributes.

        Recognized attributes: connectionStringName, containerName,
        defaultContentType.

        Raises:
            ConfigurationError: On missing, invalid or unrecognized attributes
        """
        params = ProviderParameters(name, parameters)
        connection_string_name = params.pop("connectionStringName", "")
        container_name = params.pop("containerName", DEFAULT_CONTAINER_NAME)
        default_content_type = params.pop("defaultContentType", DEFAULT_CONTENT_TYPE)
        params.ensure_consumed()

        return cls(
            name,
            connection_string_name or "",
            container_name=container_name or "",
            default_content_type=default_content_type or "",
            connection_strings=connection_strings,
            service_client=service_client,
            logger=logger,
        )

    def _writable_container(self) -> ContainerClient:
        if not self._container_ready:
            with self._container_lock:
                if not self._container_ready:
                    try:
                        self._container.create_container()
                        self.logger.info("Container created", provider=self.name, container=self.container_name)
                    except ResourceExistsError:
                        self.logger.debug("Container already exists", provider=self.name, container=self.container_name)
                    self._container_ready = True
        return self._container

    def exists(self, name: str) -> bool:
        blob = self._container.get_blob_client(check_name(name))
        try:
            blob.get_blob_properties()
        except ResourceNotFoundError:
            return False
        except AzureError as e:
            self.logger.error("Failed to fetch blob properties", provider=self.name, object_name=name, error=str(e))
            raise
        return True

    def delete(self, name: str) -> bool:
        blob = self._container.get_blob_client(check_name(name))
        try:
            blob.delete_blob()
        except ResourceNotFoundError:
            return False
        except AzureError as e:
            self.logger.error("Failed to delete blob", provider=self.name, object_name=name, error=str(e))
            raise

        self.logger.debug("Object deleted", provider=self.name, object_name=name)
        return True

    def load(self, name: str) -> LoadResult:
        blob = self._container.get_blob_client(check_name(name))
        try:
            downloader = blob.download_blob()
            data = downloader.readall()
        except ResourceNotFoundError:
            return LoadResult.missing()
        except AzureError as e:
            self.logger.error("Failed to download blob", provider=self.name, object_name=name, error=str(e))
            raise

        settings = downloader.properties.content_settings
        content_type = (settings.content_type if settings else None) or self.default_content_type
        self.logger.debug("Object loaded", provider=self.name, object_name=name, size=len(data))
        return LoadResult(content=bytes(data), content_type=content_type, found=True)

    def save(self, name: str, content: Content, content_type: Optional[str] = None) -> None:
        self._check_save(name, content, content_type)
        stored_type = effective_content_type(content_type, self.default_content_type)
        body = bytes(content) if is_buffer(content) else content  # type: ignore[arg-type]

        blob = self._writable_container().get_blob_client(name)
        try:
            blob.upload_blob(
                body,
                overwrite=True,
                content_settings=ContentSettings(content_type=stored_type),
            )
        except AzureError as e:
            self.logger.error("Failed to upload blob", provider=self.name, object_name=name, error=str(e))
            raise

        self.logger.debug("Object saved", provider=self.name, object_name=name, content_type=stored_type)
