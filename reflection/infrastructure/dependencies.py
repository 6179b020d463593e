"""Dependency wiring: builds infrastructure adapters from Settings."""

import logging
from pathlib import Path

from reflection.application.interfaces import BlobStore
from reflection.application.services import WidthScale
from reflection.config import Settings
from reflection.infrastructure.database import (
    SQLAlchemyBlobStore,
    build_engine,
    build_session_factory,
    init_database,
)
from reflection.infrastructure.storage import InMemoryBlobStore, LocalFileBlobStore

logger = logging.getLogger(__name__)


async def build_blob_store(settings: Settings) -> BlobStore:
    """Provides the BlobStore selected by ``settings.storage_backend``."""
    backend = settings.storage_backend.lower()

    if backend == "memory":
        return InMemoryBlobStore()

    if backend == "file":
        return LocalFileBlobStore(settings.data_dir)

    if backend == "sqlite":
        if settings.database_url.startswith("sqlite:///"):
            db_path = Path(settings.database_url.removeprefix("sqlite:///"))
            db_path.parent.mkdir(parents=True, exist_ok=True)
        engine = build_engine(settings.database_url, echo=False)
        await init_database(engine)
        logger.info("Using SQL blob store at %s", settings.database_url)
        return SQLAlchemyBlobStore(build_session_factory(engine), engine)

    raise ValueError(f"Unknown storage backend: {settings.storage_backend!r}")


def width_scale_from(settings: Settings) -> WidthScale:
    return WidthScale(
        base_fraction=settings.bar_base_fraction,
        max_fraction=settings.bar_max_fraction,
        min_fraction=settings.bar_min_fraction,
        reference_hours=settings.bar_reference_hours,
    )
