from .local_blob_store import LocalFileBlobStore
from .memory_blob_store import InMemoryBlobStore

__all__ = [
    "LocalFileBlobStore",
    "InMemoryBlobStore",
]
