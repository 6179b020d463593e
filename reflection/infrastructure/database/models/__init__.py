from .blob import BlobModel

__all__ = [
    "BlobModel",
]
