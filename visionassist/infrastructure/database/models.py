"""SQLAlchemy models for the face descriptor store."""
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import JSON, DateTime, Index, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class Face(Base):
    """One registered face descriptor."""

    __tablename__ = "faces"
    __table_args__ = (
        Index("idx_faces_user_timestamp", "user_id", "timestamp"),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Display label, not unique"
    )
    descriptor: Mapped[List[float]] = mapped_column(
        JSON,
        nullable=False,
        comment="Face embedding vector"
    )
    user_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Partition key"
    )
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        nullable=False
    )
    image_url: Mapped[Optional[str]] = mapped_column(
        String(2048),
        nullable=True
    )
