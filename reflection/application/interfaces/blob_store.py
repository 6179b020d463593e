"""Abstract persistence port: a key-value store of opaque byte blobs."""

from abc import ABC, abstractmethod


class BlobStore(ABC):
    """Port for blob persistence: implemented in the infrastructure layer.

    Implementations raise ``PersistenceError`` when a read or write fails.
    """

    @abstractmethod
    async def load(self, key: str) -> bytes | None:
        """Return the bytes stored under ``key``, or None if absent."""
        ...

    @abstractmethod
    async def save(self, key: str, data: bytes) -> None:
        """Store ``data`` under ``key``, replacing any previous value."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove ``key``. Returns True if deleted, False if absent."""
        ...

    async def close(self) -> None:
        """Release any connections held by the store. No-op by default."""
        return None
