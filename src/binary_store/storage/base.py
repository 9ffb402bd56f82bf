"""Capability contract for store providers

Defines the operation set every backend implements and the argument checks
they share.
"""

import io
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import BinaryIO, Optional, Union

from binary_store.exceptions import ArgumentError
from binary_store.storage.validation import check_content_type, check_name

DEFAULT_CONTENT_TYPE = "application/octet-stream"

Content = Union[bytes, bytearray, memoryview, BinaryIO]


@dataclass(frozen=True)
class LoadResult:
    """Outcome of a load

    Attributes:
        content: Object bytes, or None when not found
        content_type: Stored content type, or None when not found
        found: False when the object does not exist
    """

    content: Optional[bytes]
    content_type: Optional[str]
    found: bool

    @classmethod
    def missing(cls) -> "LoadResult":
        return cls(content=None, content_type=None, found=False)

    def as_stream(self) -> Optional[BinaryIO]:
        """Return the content as a readable stream, or None when not found."""
        if not self.found or self.content is None:
            return None
        return io.BytesIO(self.content)


def is_buffer(content: object) -> bool:
    return isinstance(content, (bytes, bytearray, memoryview))


class StoreProvider(ABC):
    """Abstract base class for binary object stores

    Implementations must be safe to call concurrently from several threads.
    No per-name locking is provided: concurrent saves to one name race and the
    last completed save wins.
    """

    name: str
    default_content_type: str = DEFAULT_CONTENT_TYPE

    @abstractmethod
    def exists(self, name: str) -> bool:
        """
        Check whether an object exists

        Args:
            name: Object name

        Returns:
            True if the object exists, False otherwise

        Raises:
            ValidationError: If name is malformed
        """
        pass

    @abstractmethod
    def delete(self, name: str) -> bool:
        """
        Delete an object and any metadata kept for it

        Args:
            name: Object name

        Returns:
            True if deleted, False if it did not exist

        Raises:
            ValidationError: If name is malformed
        """
        pass

    @abstractmethod
    def load(self, name: str) -> LoadResult:
        """
        Load an object's content and content type

        Args:
            name: Object name

        Returns:
            LoadResult; ``found`` is False when the object does not exist

        Raises:
            ValidationError: If name is malformed
        """
        pass

    @abstractmethod
    def save(self, name: str, content: Content, content_type: Optional[str] = None) -> None:
        """
        Create or fully replace an object

        Args:
            name: Object name
            content: Raw bytes or a readable binary stream
            content_type: MIME type; the provider default is stored when empty

        Raises:
            ValidationError: If name or content type is malformed
            ArgumentError: If content is missing or not readable
        """
        pass

    def _check_save(self, name: str, content: Content, content_type: Optional[str]) -> None:
        check_name(name)
        check_content_type(content_type)
        if content is None:
            raise ArgumentError(
                "MISSING_ARGUMENT", "Content cannot be None.", {"argument": "content"}
            )
        if is_buffer(content):
            return
        if not callable(getattr(content, "read", None)):
            raise ArgumentError(
                "MISSING_ARGUMENT",
                f"Content must be bytes or a readable stream, got {type(content).__name__}.",
                {"argument": "content"},
            )
        readable = getattr(content, "readable", None)
        try:
            can_read = readable() if callable(readable) else True
        except ValueError:
            # Closed file objects raise instead of answering
            can_read = False
        if not can_read:
            raise ArgumentError(
                "UNREADABLE_STREAM",
                "The stream does not support reading.",
                {"argument": "content"},
            )
        # A zero-length read consumes nothing and reveals text streams
        if isinstance(content, io.TextIOBase) or not isinstance(content.read(0), (bytes, bytearray)):
            raise ArgumentError(
                "UNREADABLE_STREAM",
                "The stream must be opened in binary mode.",
                {"argument": "content"},
            )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
