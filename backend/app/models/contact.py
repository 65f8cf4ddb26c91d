"""
Contacts API — Contact SQLAlchemy Model
========================================

What:  ORM model representing the `contacts` table.
Why:   Maps Python objects to database rows for type-safe database operations.
How:   Inherits from the declarative Base; Alembic reads this for migrations.
Who:   Used by ContactService for CRUD operations.

Table Design Rationale:
    - UUID primary key: Opaque and non-sequential, generated in Python so it
      works the same on PostgreSQL and SQLite
    - email: Stored trimmed and lowercased; the unique constraint therefore
      enforces case-insensitive uniqueness
    - Text columns: names, email and color have no length limit, so any
      value the validation rules accept can be stored
    - birthday: DATE, no time component
    - created_at / updated_at: UTC, timezone-aware
    - revision: Internal revision marker bumped on every UPDATE; never
      exposed through the API
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import Date, DateTime, Index, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Contact(Base):
    """
    A single contact record.

    Lifecycle:
        1. Inserted by ContactService.create (id and timestamps assigned here)
        2. Changed only by ContactService.update (revision and updated_at bump)
        3. Removed by ContactService.delete (hard delete)
    """

    __tablename__ = "contacts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Opaque unique identifier, assigned once at creation",
    )

    first_name: Mapped[str] = mapped_column(Text, nullable=False)
    last_name: Mapped[str] = mapped_column(Text, nullable=False)

    # Unique across the table; lowercase so the constraint is case-insensitive
    email: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        unique=True,
        comment="Lowercased email address, unique across all contacts",
    )

    # Free-form; filtering compares it exactly
    favorite_color: Mapped[str] = mapped_column(Text, nullable=False)

    birthday: Mapped[date] = mapped_column(Date, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    revision: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": revision}

    __table_args__ = (
        Index("idx_contacts_favorite_color", "favorite_color"),
        Index("idx_contacts_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Contact(id={self.id}, email='{self.email}')>"
