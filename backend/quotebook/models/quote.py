"""
Quotebook Backend: Quote SQLAlchemy Model
==========================================

What:  ORM model representing the `quotes` table.
Who:   Read and written through the storage port by QuoteService,
       DuplicateDetector and DailyQuoteSelector; read by Alembic.

Table Design:
    - Integer primary key assigned by the database (exclusion lists in the
      random endpoints are lists of these ids)
    - text/author uniqueness is NOT a database constraint; the validation
      engine enforces it with a case/whitespace-insensitive lookup
    - featured_date: calendar date (UTC) on which the quote was the daily
      quote; at most one per date by selection policy, not by constraint
    - date_added drives advanced-search date ranges; created_at drives
      newest-first ordering

    Index on created_at DESC:
        Every list/search query orders by created_at DESC.
"""

from datetime import date, datetime, timezone

from sqlalchemy import Boolean, Date, DateTime, Index, Integer, String, Text, false
from sqlalchemy import text as sql_text
from sqlalchemy.orm import Mapped, mapped_column

from quotebook.database import Base

VERIFICATION_STATUSES = ("verified", "pending", "disputed")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Quote(Base):
    """
    A motivational saying attributed to an author.

    Lifecycle:
        1. Created through validated insert (verification_status='pending'
           unless given)
        2. Replaced wholesale on update (no partial patch)
        3. featured_date stamped by the daily selector
        4. Hard-deleted; no tombstones
    """

    __tablename__ = "quotes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # ── Content ───────────────────────────────────────────────────────────
    text: Mapped[str] = mapped_column(Text, nullable=False)
    author: Mapped[str] = mapped_column(String(100), nullable=False)
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    # Comma-separated free text, e.g. "work,passion,greatness"
    tags: Mapped[str | None] = mapped_column(String(200), nullable=True)

    # ── Provenance ────────────────────────────────────────────────────────
    # source_title loosely matches sources.title (display join, not a FK)
    source_title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    source_url: Mapped[str | None] = mapped_column(String(2083), nullable=True)
    source_type: Mapped[str | None] = mapped_column(
        String(50), nullable=True, default="unknown", server_default=sql_text("'unknown'")
    )
    verification_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="pending",
        server_default=sql_text("'pending'"),
        comment="verified, pending, disputed",
    )
    quality_score: Mapped[int] = mapped_column(
        Integer, nullable=False, default=5, server_default=sql_text("5")
    )
    language: Mapped[str] = mapped_column(
        String(10), nullable=False, default="en", server_default=sql_text("'en'")
    )
    context_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # ── Featuring ─────────────────────────────────────────────────────────
    is_featured: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    featured_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # ── Timestamps (UTC) ──────────────────────────────────────────────────
    date_added: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=sql_text("CURRENT_TIMESTAMP"),
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=sql_text("CURRENT_TIMESTAMP"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=sql_text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_quotes_created_at", created_at.desc()),
        Index("idx_quotes_category", "category"),
        Index("idx_quotes_featured_date", "featured_date"),
    )

    def __repr__(self) -> str:
        return f"<Quote(id={self.id}, author='{self.author}', category='{self.category}')>"
