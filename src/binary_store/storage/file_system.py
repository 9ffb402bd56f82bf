"""Filesystem store provider

Stores each object as a regular file under a root directory. The content
type is kept in a sidecar text file next to it:

    <root>/a/b/file.ext          content
    <root>/a/b/file.ext.$type    content type

Content and sidecar are written one after the other, not atomically. If the
sidecar is missing or empty the provider's default content type is reported.
"""

from __future__ import annotations

import errno
import shutil
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from binary_store.config.settings import ProviderParameters
from binary_store.exceptions import ConfigurationError
from binary_store.logger import Logger, create_logger

from .base import DEFAULT_CONTENT_TYPE, Content, LoadResult, StoreProvider, is_buffer
from .validation import check_name, effective_content_type

DEFAULT_BUFFER_SIZE = 65536
TYPE_SUFFIX = ".$type"
APP_ROOT_PREFIX = "~/"


class FileSystemStoreProvider(StoreProvider):
    """Store provider backed by a local directory tree

    Example:
        store = FileSystemStoreProvider("local", "/srv/blobs")
        store.save("docs/readme.txt", b"hello", "text/plain")
        result = store.load("docs/readme.txt")
        assert result.found and result.content == b"hello"
    """

    def __init__(
        self,
        name: str,
        folder_name: Union[str, Path],
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        default_content_type: str = DEFAULT_CONTENT_TYPE,
        app_root: Optional[Union[str, Path]] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        """Initialize the provider and create its root directory.

        Args:
            name: Provider name used in the registry
            folder_name: Root directory; "~/..." is relative to ``app_root``
            buffer_size: Copy buffer size for stream input (positive)
            default_content_type: Content type stored when none is supplied
            app_root: Application root (defaults to the working directory)
            logger: Optional logger instance

        Raises:
            ConfigurationError: If any setting is missing or invalid
        """
        self.name = name
        self.logger = logger or create_logger(name="file-store")

        if not str(folder_name or "").strip():
            raise ConfigurationError(
                "MISSING_FOLDER_NAME",
                'Required attribute "folderName" not set.',
                {"provider": name},
            )
        if isinstance(buffer_size, bool) or not isinstance(buffer_size, int) or buffer_size < 1:
            raise ConfigurationError(
                "INVALID_BUFFER_SIZE",
                "Buffer size must be positive integer.",
                {"provider": name, "buffer_size": buffer_size},
            )
        if not default_content_type or not default_content_type.strip():
            raise ConfigurationError(
                "INVALID_DEFAULT_CONTENT_TYPE",
                "Invalid default content type.",
                {"provider": name},
            )

        self.folder_name = str(folder_name)
        self.buffer_size = buffer_size
        self.default_content_type = default_content_type
        self.root = self._resolve_root(self.folder_name, app_root)

        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self.logger.error("Failed to create store folder", provider=name, root=str(self.root), error=str(e))
            raise ConfigurationError(
                "FOLDER_NOT_CREATED",
                f"Failed to create store folder: {e}",
                {"provider": name, "root": str(self.root)},
            ) from e

        self.logger.info("FileSystemStoreProvider initialized", provider=name, root=str(self.root))

    @classmethod
    def from_parameters(
        cls,
        name: str,
        parameters: Optional[Mapping[str, Any]] = None,
        app_root: Optional[Union[str, Path]] = None,
        logger: Optional[Logger] = None,
    ) -> "FileSystemStoreProvider":
        """Build a provider from raw configuration attributes.

        Recognized attributes: folderName, bufferSize, defaultContentType.

        Raises:
            ConfigurationError: On missing, invalid or unrecognized attributes
        """
        params = ProviderParameters(name, parameters)
        folder_name = params.pop("folderName", "")
        default_content_type = params.pop("defaultContentType", DEFAULT_CONTENT_TYPE)
        buffer_size = params.pop_int("bufferSize", DEFAULT_BUFFER_SIZE)
        params.ensure_consumed()

        return cls(
            name,
            folder_name or "",
            buffer_size=buffer_size,
            default_content_type=default_content_type or "",
            app_root=app_root,
            logger=logger,
        )

    @staticmethod
    def _resolve_root(folder_name: str, app_root: Optional[Union[str, Path]]) -> Path:
        if folder_name.startswith(APP_ROOT_PREFIX):
            base = Path(app_root) if app_root else Path.cwd()
            return (base / folder_name[len(APP_ROOT_PREFIX):]).absolute()
        return Path(folder_name).absolute()

    def _path(self, name: str) -> Path:
        return self.root.joinpath(*check_name(name).split("/"))

    @staticmethod
    def _sidecar(path: Path) -> Path:
        return path.with_name(path.name + TYPE_SUFFIX)

    def _read_content_type(self, path: Path) -> str:
        try:
            stored = self._sidecar(path).read_text(encoding="utf-8")
        except FileNotFoundError:
            return self.default_content_type
        return stored if stored.strip() else self.default_content_type

    def exists(self, name: str) -> bool:
        return self._path(name).is_file()

    def delete(self, name: str) -> bool:
        path = self._path(name)
        if not path.is_file():
            return False

        try:
            path.unlink()
        except FileNotFoundError:
            # Removed concurrently; the other caller reports the deletion
            return False
        except OSError as e:
            self.logger.error("Failed to delete object", provider=self.name, object_name=name, error=str(e))
            raise

        self._sidecar(path).unlink(missing_ok=True)

        parent = path.parent
        if parent != self.root:
            try:
                parent.rmdir()
            except OSError as e:
                # Still holds siblings, or a concurrent delete removed it first
                if e.errno not in (errno.ENOTEMPTY, errno.EEXIST, errno.ENOENT):
                    raise
                self.logger.debug("Folder left in place", provider=self.name, folder=str(parent))

        self.logger.debug("Object deleted", provider=self.name, object_name=name)
        return True

    def load(self, name: str) -> LoadResult:
        path = self._path(name)
        if not path.is_file():
            return LoadResult.missing()

        try:
            data = path.read_bytes()
        except FileNotFoundError:
            return LoadResult.missing()
        except OSError as e:
            self.logger.error("Failed to read object", provider=self.name, object_name=name, error=str(e))
            raise

        content_type = self._read_content_type(path)
        self.logger.debug("Object loaded", provider=self.name, object_name=name, size=len(data))
        return LoadResult(content=data, content_type=content_type, found=True)

    def save(self, name: str, content: Content, content_type: Optional[str] = None) -> None:
        self._check_save(name, content, content_type)
        path = self._path(name)
        stored_type = effective_content_type(content_type, self.default_content_type)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            if is_buffer(content):
                path.write_bytes(content)  # type: ignore[arg-type]
            else:
                with open(path, "wb") as f:
                    shutil.copyfileobj(content, f, self.buffer_size)  # type: ignore[misc]
            self._sidecar(path).write_text(stored_type, encoding="utf-8")
        except OSError as e:
            self.logger.error("Failed to save object", provider=self.name, object_name=name, error=str(e))
            raise

        self.logger.debug("Object saved", provider=self.name, object_name=name, content_type=stored_type)
