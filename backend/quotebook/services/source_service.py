"""
Quotebook Backend: Source Service
==================================

What:  Validated CRUD and read queries for provenance sources, plus the
       display join from a source to the quotes that cite it by title.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import or_

from quotebook.config import settings
from quotebook.exceptions import ValidationError
from quotebook.models.quote import Quote
from quotebook.models.source import Source
from quotebook.schemas.quote import QuoteResponse
from quotebook.schemas.source import SourceCreate, SourceListResponse, SourceResponse
from quotebook.services.storage import StoragePort
from quotebook.services.validation import validate_source

logger = logging.getLogger(__name__)

MOST_CREDIBLE_FIRST = (Source.credibility_rating.desc(), Source.created_at.desc(), Source.id.desc())


def source_record(payload: SourceCreate) -> Dict[str, Any]:
    record = {}
    for key, value in payload.model_dump().items():
        if isinstance(value, str):
            value = value.strip() or None
        record[key] = value
    if record.get("credibility_rating") is None:
        record["credibility_rating"] = 5
    return record


def _to_responses(rows) -> List[SourceResponse]:
    return [SourceResponse.model_validate(row) for row in rows]


class SourceService:
    """Business logic for sources. Stateless; the storage port is passed per call."""

    async def create_source(self, storage: StoragePort, payload: SourceCreate) -> SourceResponse:
        """
        Raises:
            ValidationError: One or more violations (all of them listed)
        """
        record = source_record(payload)
        errors = validate_source(record)
        if errors:
            raise ValidationError(errors)

        source_id = await storage.insert(Source, record)
        logger.info("Source %s created (title=%r)", source_id, record["title"])
        stored = await storage.query_one(Source, where=[Source.id == source_id])
        return SourceResponse.model_validate(stored)

    async def update_source(
        self, storage: StoragePort, source_id: int, payload: SourceCreate
    ) -> Optional[SourceResponse]:
        """Full replace. None when source_id does not exist."""
        existing = await storage.query_one(Source, where=[Source.id == source_id])
        if existing is None:
            return None

        record = source_record(payload)
        errors = validate_source(record)
        if errors:
            raise ValidationError(errors)

        await storage.update(Source, source_id, record)
        logger.info("Source %s replaced", source_id)
        stored = await storage.query_one(Source, where=[Source.id == source_id])
        return SourceResponse.model_validate(stored)

    async def delete_source(self, storage: StoragePort, source_id: int) -> int:
        return await storage.delete(Source, source_id)

    async def get_source(self, storage: StoragePort, source_id: int) -> Optional[SourceResponse]:
        source = await storage.query_one(Source, where=[Source.id == source_id])
        return SourceResponse.model_validate(source) if source is not None else None

    async def list_sources(
        self, storage: StoragePort, limit: int = 50, offset: int = 0
    ) -> SourceListResponse:
        rows = await storage.query_many(
            Source, order_by=MOST_CREDIBLE_FIRST, limit=limit, offset=offset
        )
        total = await storage.count(Source)
        return SourceListResponse(
            sources=_to_responses(rows),
            limit=limit,
            offset=offset,
            total=total,
            has_more=offset + limit < total,
        )

    async def count_sources(self, storage: StoragePort) -> int:
        return await storage.count(Source)

    async def get_by_type(
        self, storage: StoragePort, source_type: str, limit: Optional[int] = None
    ) -> List[SourceResponse]:
        rows = await storage.query_many(
            Source,
            where=[Source.source_type == source_type],
            order_by=MOST_CREDIBLE_FIRST,
            limit=settings.default_page_size if limit is None else limit,
        )
        return _to_responses(rows)

    async def get_by_credibility_rating(
        self, storage: StoragePort, min_rating: int, limit: Optional[int] = None
    ) -> List[SourceResponse]:
        rows = await storage.query_many(
            Source,
            where=[Source.credibility_rating >= min_rating],
            order_by=MOST_CREDIBLE_FIRST,
            limit=settings.default_page_size if limit is None else limit,
        )
        return _to_responses(rows)

    async def get_high_credibility_sources(
        self, storage: StoragePort, min_rating: int = 7
    ) -> List[SourceResponse]:
        """Every source rated at least min_rating, best first, then by title."""
        rows = await storage.query_many(
            Source,
            where=[Source.credibility_rating >= min_rating],
            order_by=(Source.credibility_rating.desc(), Source.title.asc()),
        )
        return _to_responses(rows)

    async def search(
        self, storage: StoragePort, term: str, limit: Optional[int] = None
    ) -> List[SourceResponse]:
        """Case-insensitive substring over title, author, publisher and description."""
        match = or_(
            Source.title.icontains(term, autoescape=True),
            Source.author.icontains(term, autoescape=True),
            Source.publisher.icontains(term, autoescape=True),
            Source.description.icontains(term, autoescape=True),
        )
        rows = await storage.query_many(
            Source,
            where=[match],
            order_by=MOST_CREDIBLE_FIRST,
            limit=settings.default_page_size if limit is None else limit,
        )
        return _to_responses(rows)

    async def get_source_types(self, storage: StoragePort) -> List[str]:
        return await storage.distinct_values(
            Source, Source.source_type, order_by=(Source.source_type,)
        )

    async def get_quotes_by_source(
        self, storage: StoragePort, source_id: int, limit: Optional[int] = None
    ) -> Optional[List[QuoteResponse]]:
        """
        Quotes whose source_title equals the source's title, newest first.

        Returns None when the source does not exist. The match is on text,
        not a foreign key, so renaming a source detaches its quotes.
        """
        source = await storage.query_one(Source, where=[Source.id == source_id])
        if source is None:
            return None
        rows = await storage.query_many(
            Quote,
            where=[Quote.source_title == source.title],
            order_by=(Quote.created_at.desc(), Quote.id.desc()),
            limit=settings.default_page_size if limit is None else limit,
        )
        return [QuoteResponse.model_validate(row) for row in rows]


source_service = SourceService()
