"""Create quotes and sources tables

Revision ID: 001
Revises: None
Create Date: 2024-01-15 00:00:00.000000+00:00

What:  Creates the `quotes` catalog and the `sources` provenance table.
How:   Portable column types only, so the same revision runs on SQLite and
       PostgreSQL.

Rollback: downgrade() drops both tables (destructive, all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "quotes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("author", sa.String(100), nullable=False),
        sa.Column("category", sa.String(50), nullable=True),
        sa.Column("tags", sa.String(200), nullable=True),
        sa.Column("source_title", sa.String(255), nullable=True),
        sa.Column("source_url", sa.String(2083), nullable=True),
        sa.Column(
            "source_type", sa.String(50), nullable=True, server_default=sa.text("'unknown'")
        ),
        sa.Column(
            "verification_status",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'pending'"),
            comment="verified, pending or disputed",
        ),
        sa.Column("quality_score", sa.Integer(), nullable=False, server_default=sa.text("5")),
        sa.Column("language", sa.String(10), nullable=False, server_default=sa.text("'en'")),
        sa.Column("context_notes", sa.Text(), nullable=True),
        sa.Column("is_featured", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "featured_date",
            sa.Date(),
            nullable=True,
            comment="UTC day this quote was the quote of the day",
        ),
        sa.Column(
            "date_added",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_quotes"),
    )
    op.create_index("idx_quotes_created_at", "quotes", [sa.text("created_at DESC")])
    op.create_index("idx_quotes_category", "quotes", ["category"])
    op.create_index("idx_quotes_featured_date", "quotes", ["featured_date"])

    op.create_table(
        "sources",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("author", sa.String(100), nullable=True),
        sa.Column("publication_year", sa.Integer(), nullable=True),
        sa.Column("publisher", sa.String(255), nullable=True),
        sa.Column("isbn", sa.String(20), nullable=True),
        sa.Column("url", sa.String(2083), nullable=True),
        sa.Column("source_type", sa.String(50), nullable=False),
        sa.Column(
            "credibility_rating", sa.Integer(), nullable=False, server_default=sa.text("5")
        ),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_sources"),
    )
    op.create_index("idx_sources_title", "sources", ["title"])
    op.create_index("idx_sources_credibility", "sources", [sa.text("credibility_rating DESC")])


def downgrade() -> None:
    op.drop_index("idx_sources_credibility", table_name="sources")
    op.drop_index("idx_sources_title", table_name="sources")
    op.drop_table("sources")
    op.drop_index("idx_quotes_featured_date", table_name="quotes")
    op.drop_index("idx_quotes_category", table_name="quotes")
    op.drop_index("idx_quotes_created_at", table_name="quotes")
    op.drop_table("quotes")
