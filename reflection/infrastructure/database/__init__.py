from .base import Base
from .blob_store import SQLAlchemyBlobStore
from .session import build_engine, build_session_factory, init_database

__all__ = [
    "Base",
    "SQLAlchemyBlobStore",
    "build_engine",
    "build_session_factory",
    "init_database",
]
