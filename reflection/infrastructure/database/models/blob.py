"""SQLAlchemy ORM model for persisted blobs."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, LargeBinary, String
from sqlalchemy.orm import Mapped, mapped_column

from reflection.infrastructure.database.base import Base


class BlobModel(Base):
    """ORM model: maps to the 'blobs' table, one row per logical key."""

    __tablename__ = "blobs"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    data: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<BlobModel(key='{self.key}', size={len(self.data or b'')})>"
