"""SQLAlchemy ORM models for MultiTimer."""

from datetime import datetime

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class KeyValue(Base):
    """One durable blob per key (the whole timer collection lives under
    a single key)."""

    __tablename__ = "kv_store"

    key = Column(String(64), primary_key=True)
    value = Column(Text, nullable=False, default="")
    updated_at = Column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow,
    )

    def __repr__(self) -> str:
        return f"<KeyValue key={self.key} bytes={len(self.value or '')}>"
