"""
Quotebook Backend: Source SQLAlchemy Model
===========================================

What:  ORM model for the `sources` table: books, speeches, articles and
       other provenance records a quote may cite by title.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy import text as sql_text
from sqlalchemy.orm import Mapped, mapped_column

from quotebook.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Source(Base):
    __tablename__ = "sources"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    author: Mapped[str | None] = mapped_column(String(100), nullable=True)
    publication_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    publisher: Mapped[str | None] = mapped_column(String(255), nullable=True)
    isbn: Mapped[str | None] = mapped_column(String(20), nullable=True)
    url: Mapped[str | None] = mapped_column(String(2083), nullable=True)
    source_type: Mapped[str] = mapped_column(String(50), nullable=False)
    credibility_rating: Mapped[int] = mapped_column(
        Integer, nullable=False, default=5, server_default=sql_text("5")
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

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
        # Quotes join to sources on title
        Index("idx_sources_title", "title"),
        Index("idx_sources_credibility", credibility_rating.desc()),
    )

    def __repr__(self) -> str:
        return f"<Source(id={self.id}, title='{self.title}', type='{self.source_type}')>"
