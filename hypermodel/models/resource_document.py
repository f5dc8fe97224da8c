"""Resource Document ORM — one row per stored resource record, any type.

Invariants:
    - id is an opaque store-generated hex string (uuid4)
    - type partitions rows into per-type collections
    - body holds the record's attribute and relationship values as JSON

Design Decisions:
    - Single JSON-bodied table over per-type tables: model definitions are
      declarations, not schema; adding a type needs no migration
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column

from hypermodel.db.base import Base


def generate_resource_id() -> str:
    return uuid.uuid4().hex


class ResourceDocument(Base):
    """A stored resource record."""
    __tablename__ = "resource_documents"
    __table_args__ = (Index("ix_resource_documents_type", "type"),)

    id: Mapped[str] = mapped_column(
        String(32), primary_key=True, default=generate_resource_id,
    )
    type: Mapped[str] = mapped_column(String(100), nullable=False)
    body: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def to_record(self) -> dict:
        """Flatten into the record shape the core works with."""
        return {**(self.body or {}), "id": self.id}
