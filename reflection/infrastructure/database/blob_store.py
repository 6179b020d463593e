"""Concrete BlobStore implementation backed by SQLAlchemy."""

import logging
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from reflection.application.interfaces import BlobStore
from reflection.domain.exceptions import PersistenceError
from reflection.infrastructure.database.models import BlobModel

logger = logging.getLogger(__name__)


class SQLAlchemyBlobStore(BlobStore):
    """Implements the BlobStore port with one short-lived session per call."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        engine: AsyncEngine | None = None,
    ):
        self._session_factory = session_factory
        self._engine = engine

    async def load(self, key: str) -> bytes | None:
        try:
            async with self._session_factory() as session:
                model = await session.get(BlobModel, key)
                return bytes(model.data) if model else None
        except SQLAlchemyError as exc:
            raise PersistenceError(key, exc) from exc

    async def save(self, key: str, data: bytes) -> None:
        try:
            async with self._session_factory() as session:
                model = await session.get(BlobModel, key)
                if model is None:
                    session.add(BlobModel(key=key, data=data))
                else:
                    model.data = data
                    model.updated_at = datetime.now(timezone.utc)
                await session.commit()
        except SQLAlchemyError as exc:
            raise PersistenceError(key, exc) from exc

        logger.debug("Saved blob '%s' (%d bytes)", key, len(data))

    async def delete(self, key: str) -> bool:
        try:
            async with self._session_factory() as session:
                model = await session.get(BlobModel, key)
                if model is None:
                    return False
                await session.delete(model)
                await session.commit()
                return True
        except SQLAlchemyError as exc:
            raise PersistenceError(key, exc) from exc

    async def close(self) -> None:
        """Dispose the engine when this store was handed ownership of it."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
