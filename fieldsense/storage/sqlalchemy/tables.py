"""SQLAlchemy table definitions.

Thin persistence mapping; the stores above it own the domain logic.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, LargeBinary, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class KeyValueTable(Base):
    """One row per key; binary values go to `blob`, everything else to `value`."""

    __tablename__ = "kv_records"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[Any] = mapped_column(JSON(none_as_null=True), nullable=True)
    blob: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
