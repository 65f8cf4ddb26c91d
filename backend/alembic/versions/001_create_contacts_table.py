"""Create contacts table

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the `contacts` table and its indexes.
Notes: Column types are dialect-neutral (sa.Uuid, sa.Date, DateTime with
       timezone) so the same revision runs on PostgreSQL and SQLite.
       See app/models/contact.py for field semantics.

Rollback: downgrade() drops the table (destructive).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "contacts",
        sa.Column(
            "id",
            sa.Uuid(as_uuid=True),
            nullable=False,
            comment="Opaque unique identifier, assigned once at creation",
        ),
        sa.Column("first_name", sa.Text(), nullable=False),
        sa.Column("last_name", sa.Text(), nullable=False),
        sa.Column(
            "email",
            sa.Text(),
            nullable=False,
            comment="Lowercased email address, unique across all contacts",
        ),
        sa.Column("favorite_color", sa.Text(), nullable=False),
        sa.Column("birthday", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        # Internal revision marker, bumped on every UPDATE
        sa.Column("revision", sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    # Listing filters on color and orders by creation time
    op.create_index("idx_contacts_favorite_color", "contacts", ["favorite_color"])
    op.create_index("idx_contacts_created_at", "contacts", ["created_at"])


def downgrade() -> None:
    op.drop_index("idx_contacts_created_at", table_name="contacts")
    op.drop_index("idx_contacts_favorite_color", table_name="contacts")
    op.drop_table("contacts")
