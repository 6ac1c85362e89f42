"""
Storage accessor interface.

Every backend exposes the same narrow capability over a key-addressed
object namespace. The sync engine shares one accessor instance across
all of its upload workers, so implementations MUST be safe to call from
many threads at once without external locking.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from .content_type import resolve_content_type


class ObjectMetadata:
    """Metadata reported for a stored object.

    Attributes:
        key: Object key within the namespace
        size: Size in bytes
        content_type: Media type, or None if the backend does not know it
    """

    def __init__(self, key: str, size: int, content_type: Optional[str] = None):
        self.key = key
        self.size = size
        self.content_type = content_type

    def __eq__(self, other):
        if not isinstance(other, ObjectMetadata):
            return NotImplemented
        return (self.key, self.size, self.content_type) == (
            other.key, other.size, other.content_type
        )

    def __repr__(self):
        return (
            f"ObjectMetadata(key={self.key!r}, size={self.size}, "
            f"content_type={self.content_type!r})"
        )


class StorageAccessor(ABC):
    """Abstract key/value object namespace.

    Keys are forward-slash separated strings without a leading slash.
    Backend failures are raised as :class:`~sitepub.exceptions.StorageError`.
    """

    @abstractmethod
    def write(self, key: str, data: bytes, content_type: Optional[str] = None) -> None:
        """Store *data* under *key*, replacing any existing object.

        Args:
            key: Object key
            data: Object payload
            content_type: Media type to record, if any
        """

    @abstractmethod
    def remove_all(self, prefix: str) -> None:
        """Delete every object whose key starts with *prefix*.

        Succeeds without doing anything when nothing matches.
        """

    @abstractmethod
    def list(self, prefix: str = "") -> List[str]:
        """Return the sorted keys that start with *prefix*."""

    @abstractmethod
    def stat(self, key: str) -> ObjectMetadata:
        """Return metadata for *key*.

        Raises:
            StorageError: If the object does not exist or cannot be queried
        """


class ContentTypeLayer(StorageAccessor):
    """Accessor wrapper that infers ``Content-Type`` from the key's extension.

    The guess is a fallback only: a content type passed by the caller is
    never overridden, and neither is one the backend reports from
    :meth:`stat`. Unknown extensions leave the content type unset.

    Args:
        inner: Backend to delegate to
    """

    def __init__(self, inner: StorageAccessor):
        self.inner = inner

    def write(self, key: str, data: bytes, content_type: Optional[str] = None) -> None:
        if content_type is None:
            content_type = resolve_content_type(key)
        self.inner.write(key, data, content_type)

    def remove_all(self, prefix: str) -> None:
        self.inner.remove_all(prefix)

    def list(self, prefix: str = "") -> List[str]:
        return self.inner.list(prefix)

    def stat(self, key: str) -> ObjectMetadata:
        meta = self.inner.stat(key)
        if meta.content_type is None:
            meta.content_type = resolve_content_type(key)
        return meta
