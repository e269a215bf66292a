"""
QuoteVault Backend - Quote SQLAlchemy Model
============================================

What:  ORM model representing the `quotes` table.
How:   Inherits from SQLAlchemy's DeclarativeBase; tables are created at
       startup by `database.create_tables()`.
Who:   Used by QuoteService for CRUD operations.

Column types are dialect-neutral (Uuid, DateTime, JSON) so the same model
runs on PostgreSQL in production and SQLite in tests. Text columns have no
length limit.

Index on created_at:
    Serves the only list query, "newest first" (scanned backwards).
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import JSON, DateTime, Index, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from quotevault.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Quote(Base):
    """
    A stored quote, optionally protected by a plain-text credential.

    Lifecycle:
        1. Created on POST with caller-supplied fields
        2. Mutated in place on PUT (credential may be cleared or replaced)
        3. Removed permanently on DELETE (no soft-delete, no versioning)
    """

    __tablename__ = "quotes"

    # ── Primary Key ───────────────────────────────────────────────────────
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    # ── Content ───────────────────────────────────────────────────────────
    title: Mapped[str] = mapped_column(Text, nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    author: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="Anonymous",
        server_default=text("'Anonymous'"),
    )

    # Ordered list of strings
    tags: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    # ── Protection ────────────────────────────────────────────────────────
    # NULL means "no protection"; never stored as an empty string
    credential: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        default=None,
    )

    # ── Timestamps ────────────────────────────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    __table_args__ = (
        Index("idx_quotes_created_at", "created_at"),
    )

    @property
    def is_protected(self) -> bool:
        return self.credential is not None

    def __repr__(self) -> str:
        return (
            f"<Quote(id={self.id}, title='{self.title}', "
            f"protected={self.is_protected}, created_at='{self.created_at}')>"
        )
