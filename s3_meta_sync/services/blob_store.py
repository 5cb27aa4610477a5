"""Blob-store interface consumed by the sync engine."""
from abc import ABC, abstractmethod
from typing import List


class BlobStore(ABC):
    """Minimal object-store surface: whole-object list/get/put/delete.

    Implementations raise :class:`~s3_meta_sync.exceptions.ObjectNotFound`
    from :meth:`get` when the key does not exist.
    """

    @abstractmethod
    def list(self, bucket: str, prefix: str = "") -> List[str]:
        """Return all object keys below *prefix*."""

    @abstractmethod
    def get(self, bucket: str, key: str) -> bytes:
        """Return the object's content."""

    @abstractmethod
    def put(self, bucket: str, key: str, data: bytes) -> None:
        """Store *data* under *key*."""

    @abstractmethod
    def delete(self, bucket: str, key: str) -> None:
        """Remove the object at *key*."""
