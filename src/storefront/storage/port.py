"""Object storage port for uploaded images.

The storefront only ever keeps the URL a store hands back.
"""

from abc import ABC, abstractmethod


class StorageError(Exception):
    """The storage provider rejected or failed an upload."""


class ImageStorage(ABC):
    @abstractmethod
    def store(self, data: bytes, filename: str, content_type: str, folder: str) -> str:
        """Persist ``data`` and return a durable URL for it."""
        ...

    @abstractmethod
    def discard(self, url: str) -> bool:
        """Best-effort removal of a previously stored image."""
        ...
