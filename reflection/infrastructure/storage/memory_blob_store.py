"""In-process blob store: nothing survives the process."""

from reflection.application.interfaces import BlobStore


class InMemoryBlobStore(BlobStore):
    """Dict-backed implementation of the BlobStore port."""

    def __init__(self, initial: dict[str, bytes] | None = None):
        self._blobs: dict[str, bytes] = dict(initial or {})

    async def load(self, key: str) -> bytes | None:
        return self._blobs.get(key)

    async def save(self, key: str, data: bytes) -> None:
        self._blobs[key] = bytes(data)

    async def delete(self, key: str) -> bool:
        return self._blobs.pop(key, None) is not None

    def keys(self) -> list[str]:
        return sorted(self._blobs)
