"""Local filesystem blob store: one JSON file per key.

Storage layout:
    <data_dir>/<key>.json
"""

import logging
import os
import re
from pathlib import Path

from reflection.application.interfaces import BlobStore
from reflection.domain.exceptions import PersistenceError

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_\-]+$")


class LocalFileBlobStore(BlobStore):
    """Infrastructure adapter for blob storage on the local disk."""

    def __init__(self, data_dir: str | Path):
        self._data_dir = Path(data_dir)

    def path_for(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid blob key: {key!r}")
        return self._data_dir / f"{key}.json"

    async def load(self, key: str) -> bytes | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            return path.read_bytes()
        except OSError as exc:
            raise PersistenceError(key, exc) from exc

    async def save(self, key: str, data: bytes) -> None:
        """Atomic-ish save: write a temp file next to the target, fsync, replace."""
        path = self.path_for(key)
        tmp = path.with_name(path.name + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, path)
        except OSError as exc:
            raise PersistenceError(key, exc) from exc

        logger.debug("Saved blob %s (%d bytes)", path, len(data))

    async def delete(self, key: str) -> bool:
        path = self.path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise PersistenceError(key, exc) from exc
        return True
