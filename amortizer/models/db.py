"""SQLAlchemy ORM models for persisting application state."""

from datetime import datetime

from sqlalchemy import JSON, DateTime, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class StoredState(Base):
    """One serialised ``StateSnapshot`` per storage key, replaced on every save."""
    __tablename__ = "app_state"

    key: Mapped[str] = mapped_column(String(100), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), onupdate=func.now())

    # StateSnapshot.model_dump(mode="json")
    payload: Mapped[dict] = mapped_column(JSON)
