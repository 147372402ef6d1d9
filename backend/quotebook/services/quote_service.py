"""
Quotebook Backend: Quote Service (Catalog Logic and Query Policies)
====================================================================

What:  Validated CRUD for quotes plus every read policy the API exposes:
       random selection, field filters, free-text and advanced search,
       autocomplete suggestions, near-duplicate lookup, and aggregate stats.
How:   Each operation translates its parameters into SQLAlchemy predicates
       and hands them to the storage port it is given.
Who:   Called by the quote route handlers; the daily selector lives in
       daily_quote.py and builds on the same port.

Design Decision:
    QuoteService is stateless. It receives the storage port on every call
    and re-reads whatever it needs, so there is no cached catalog to
    invalidate and no shared mutable state between concurrent requests.

Absence:
    Lookups that find nothing return None (single record) or [] (lists).
    Turning that into a 404 is the HTTP layer's job.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import func, or_

from quotebook.config import settings
from quotebook.exceptions import ValidationError
from quotebook.models.quote import Quote
from quotebook.schemas.quote import (
    AdvancedSearchFilters,
    PopularTerm,
    QuoteCreate,
    QuoteListResponse,
    QuoteResponse,
    SourceTypeStat,
    Suggestion,
    VerificationStat,
)
from quotebook.services.duplicates import find_similar_quotes
from quotebook.services.storage import StoragePort
from quotebook.services.validation import validate_quote

logger = logging.getLogger(__name__)

NEWEST_FIRST = (Quote.created_at.desc(), Quote.id.desc())

# Replacing a record resets omitted optional fields to these
QUOTE_DEFAULTS: Dict[str, Any] = {
    "source_type": "unknown",
    "verification_status": "pending",
    "quality_score": 5,
    "language": "en",
}


def _clean(value: Any) -> Any:
    """Trims strings; blank strings become None."""
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def quote_record(payload: QuoteCreate) -> Dict[str, Any]:
    """Builds the persisted column mapping from a request payload."""
    record = {key: _clean(value) for key, value in payload.model_dump().items()}
    for key, default in QUOTE_DEFAULTS.items():
        if record.get(key) is None:
            record[key] = default
    return record


def _to_responses(rows: Sequence[Quote]) -> List[QuoteResponse]:
    return [QuoteResponse.model_validate(row) for row in rows]


def _text_match(term: str):
    """Case-insensitive substring match on text OR author OR category OR tags."""
    return or_(
        Quote.text.icontains(term, autoescape=True),
        Quote.author.icontains(term, autoescape=True),
        Quote.category.icontains(term, autoescape=True),
        Quote.tags.icontains(term, autoescape=True),
    )


def _random_filters(category: Optional[str], exclude_ids: Sequence[int]) -> list:
    where = []
    if category:
        where.append(Quote.category == category)
    if exclude_ids:
        where.append(Quote.id.notin_(list(exclude_ids)))
    return where


class QuoteService:
    """
    Business logic for quotes.

    Error Handling Strategy:
        Validation failures raise ValidationError carrying the full list of
        violations. Storage failures surface from the port as StorageError
        and are not retried here.
    """

    # ══════════════════════════════════════════════════════════════════════
    # CRUD
    # ══════════════════════════════════════════════════════════════════════

    async def create_quote(self, storage: StoragePort, payload: QuoteCreate) -> QuoteResponse:
        """
        Validate and insert a new quote.

        Workflow:
            1. Trim the payload and fill defaults
            2. Field checks + duplicate-existence check
            3. Insert, then re-read the stored row

        Raises:
            ValidationError: One or more violations (all of them listed)
            StorageError: Duplicate lookup or insert failed
        """
        record = quote_record(payload)
        errors = await validate_quote(storage, record)
        if errors:
            logger.info("Quote rejected with %d violation(s)", len(errors))
            raise ValidationError(errors)

        quote_id = await storage.insert(Quote, record)
        logger.info("Quote %s created (author=%r)", quote_id, record["author"])
        stored = await storage.query_one(Quote, where=[Quote.id == quote_id])
        return QuoteResponse.model_validate(stored)

    async def update_quote(
        self, storage: StoragePort, quote_id: int, payload: QuoteCreate
    ) -> Optional[QuoteResponse]:
        """
        Replace every editable field of an existing quote.

        The duplicate check ignores the quote being replaced, so saving a
        quote unchanged is allowed.

        Returns:
            The updated quote, or None when quote_id does not exist.
        """
        existing = await storage.query_one(Quote, where=[Quote.id == quote_id])
        if existing is None:
            return None

        record = quote_record(payload)
        errors = await validate_quote(storage, record, exclude_id=quote_id)
        if errors:
            raise ValidationError(errors)

        await storage.update(Quote, quote_id, record)
        logger.info("Quote %s replaced", quote_id)
        stored = await storage.query_one(Quote, where=[Quote.id == quote_id])
        return QuoteResponse.model_validate(stored)

    async def delete_quote(self, storage: StoragePort, quote_id: int) -> int:
        """Hard delete. Returns the number of rows removed (0 or 1)."""
        changes = await storage.delete(Quote, quote_id)
        if changes:
            logger.info("Quote %s deleted", quote_id)
        return changes

    async def get_quote(self, storage: StoragePort, quote_id: int) -> Optional[QuoteResponse]:
        quote = await storage.query_one(Quote, where=[Quote.id == quote_id])
        return QuoteResponse.model_validate(quote) if quote is not None else None

    async def list_quotes(
        self, storage: StoragePort, limit: int = 50, offset: int = 0
    ) -> QuoteListResponse:
        """Newest-first page of the catalog with the overall total."""
        rows = await storage.query_many(Quote, order_by=NEWEST_FIRST, limit=limit, offset=offset)
        total = await storage.count(Quote)
        return QuoteListResponse(
            quotes=_to_responses(rows),
            limit=limit,
            offset=offset,
            total=total,
            has_more=offset + limit < total,
        )

    async def count_quotes(self, storage: StoragePort) -> int:
        return await storage.count(Quote)

    # ══════════════════════════════════════════════════════════════════════
    # Random selection
    # ══════════════════════════════════════════════════════════════════════

    async def get_random(
        self,
        storage: StoragePort,
        category: Optional[str] = None,
        exclude_ids: Sequence[int] = (),
    ) -> Optional[QuoteResponse]:
        """
        One uniformly random quote, optionally within a category and never
        one whose id is in exclude_ids. None when nothing matches.
        """
        quote = await storage.query_one(
            Quote,
            where=_random_filters(category, exclude_ids),
            order_by=(func.random(),),
        )
        return QuoteResponse.model_validate(quote) if quote is not None else None

    async def get_multiple_random(
        self,
        storage: StoragePort,
        count: int = 5,
        category: Optional[str] = None,
        exclude_ids: Sequence[int] = (),
    ) -> List[QuoteResponse]:
        """
        Up to `count` distinct random quotes. When fewer rows match, all of
        them are returned; no padding, no error.
        """
        rows = await storage.query_many(
            Quote,
            where=_random_filters(category, exclude_ids),
            order_by=(func.random(),),
            limit=count,
        )
        return _to_responses(rows)

    # ══════════════════════════════════════════════════════════════════════
    # Filters
    # ══════════════════════════════════════════════════════════════════════

    async def get_by_category(
        self, storage: StoragePort, category: str, limit: Optional[int] = None, offset: int = 0
    ) -> List[QuoteResponse]:
        """Case-sensitive exact category match, newest first."""
        rows = await storage.query_many(
            Quote,
            where=[Quote.category == category],
            order_by=NEWEST_FIRST,
            limit=settings.default_page_size if limit is None else limit,
            offset=offset,
        )
        return _to_responses(rows)

    async def get_by_author(
        self, storage: StoragePort, author: str, limit: Optional[int] = None, offset: int = 0
    ) -> List[QuoteResponse]:
        """Case-insensitive substring match on author, newest first."""
        rows = await storage.query_many(
            Quote,
            where=[Quote.author.icontains(author, autoescape=True)],
            order_by=NEWEST_FIRST,
            limit=settings.default_page_size if limit is None else limit,
            offset=offset,
        )
        return _to_responses(rows)

    async def get_by_verification_status(
        self, storage: StoragePort, status: str, limit: Optional[int] = None
    ) -> List[QuoteResponse]:
        rows = await storage.query_many(
            Quote,
            where=[Quote.verification_status == status],
            order_by=NEWEST_FIRST,
            limit=settings.default_page_size if limit is None else limit,
        )
        return _to_responses(rows)

    async def get_by_quality_score(
        self, storage: StoragePort, min_score: int, limit: Optional[int] = None
    ) -> List[QuoteResponse]:
        """quality_score >= min_score, best first, then newest."""
        rows = await storage.query_many(
            Quote,
            where=[Quote.quality_score >= min_score],
            order_by=(Quote.quality_score.desc(), *NEWEST_FIRST),
            limit=settings.default_page_size if limit is None else limit,
        )
        return _to_responses(rows)

    async def get_by_source_type(
        self, storage: StoragePort, source_type: str, limit: Optional[int] = None
    ) -> List[QuoteResponse]:
        rows = await storage.query_many(
            Quote,
            where=[Quote.source_type == source_type],
            order_by=NEWEST_FIRST,
            limit=settings.default_page_size if limit is None else limit,
        )
        return _to_responses(rows)

    # ══════════════════════════════════════════════════════════════════════
    # Search
    # ══════════════════════════════════════════════════════════════════════

    async def search(
        self, storage: StoragePort, term: str, limit: Optional[int] = None
    ) -> List[QuoteResponse]:
        """Case-insensitive substring search over text, author, category and tags."""
        rows = await storage.query_many(
            Quote,
            where=[_text_match(term)],
            order_by=NEWEST_FIRST,
            limit=settings.default_page_size if limit is None else limit,
        )
        return _to_responses(rows)

    async def advanced_search(
        self,
        storage: StoragePort,
        filters: AdvancedSearchFilters,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[QuoteResponse]:
        """
        Conjunction of the filters that are present.

        Filters:
            search_term: substring over text/author/category/tags
            category:    exact match
            author:      case-insensitive substring
            tags:        every fragment must appear in the tags column
            date_from / date_to: inclusive bounds on date_added

        With no filters present this returns the unfiltered catalog; callers
        check filters.is_empty() first.
        """
        where = []
        if filters.search_term:
            where.append(_text_match(filters.search_term))
        if filters.category:
            where.append(Quote.category == filters.category)
        if filters.author:
            where.append(Quote.author.icontains(filters.author, autoescape=True))
        for tag in filters.tags:
            where.append(Quote.tags.icontains(tag, autoescape=True))
        if filters.date_from:
            where.append(Quote.date_added >= filters.date_from)
        if filters.date_to:
            where.append(Quote.date_added <= filters.date_to)

        rows = await storage.query_many(
            Quote,
            where=where,
            order_by=NEWEST_FIRST,
            limit=settings.default_page_size if limit is None else limit,
            offset=offset,
        )
        return _to_responses(rows)

    async def get_search_suggestions(
        self, storage: StoragePort, term: str, limit: Optional[int] = None
    ) -> List[Suggestion]:
        """
        Autocomplete entries: up to limit // 2 distinct matching authors,
        then up to limit // 2 distinct matching categories, truncated to
        `limit`. No ranking beyond storage order.
        """
        if limit is None:
            limit = settings.suggestion_limit
        half = limit // 2

        authors = await storage.distinct_values(
            Quote,
            Quote.author,
            where=[Quote.author.icontains(term, autoescape=True)],
            limit=half,
        )
        categories = await storage.distinct_values(
            Quote,
            Quote.category,
            where=[Quote.category.isnot(None), Quote.category.icontains(term, autoescape=True)],
            limit=half,
        )

        suggestions = [Suggestion(suggestion=a, type="author") for a in authors]
        suggestions += [Suggestion(suggestion=c, type="category") for c in categories]
        return suggestions[:limit]

    async def get_popular_search_terms(
        self, storage: StoragePort, limit: int = 10
    ) -> List[PopularTerm]:
        """Authors with the most quotes, most prolific first."""
        groups = await storage.aggregate(
            Quote, Quote.author, Quote.quality_score, order_by_count=True, limit=limit
        )
        return [PopularTerm(term=g["key"], count=g["count"], type="author") for g in groups]

    async def find_similar(
        self,
        storage: StoragePort,
        text: str,
        threshold: Optional[float] = None,
        author: Optional[str] = None,
        category: Optional[str] = None,
    ) -> List[QuoteResponse]:
        """Near-duplicates of `text`; see duplicates.find_similar_quotes."""
        rows = await find_similar_quotes(
            storage, text, threshold=threshold, author=author, category=category
        )
        return _to_responses(rows)

    # ══════════════════════════════════════════════════════════════════════
    # Catalog facets and statistics
    # ══════════════════════════════════════════════════════════════════════

    async def get_categories(self, storage: StoragePort) -> List[str]:
        return await storage.distinct_values(
            Quote, Quote.category, where=[Quote.category.isnot(None)], order_by=(Quote.category,)
        )

    async def get_authors(self, storage: StoragePort) -> List[str]:
        return await storage.distinct_values(Quote, Quote.author, order_by=(Quote.author,))

    async def get_verification_stats(self, storage: StoragePort) -> List[VerificationStat]:
        """Count and mean quality score per verification status."""
        groups = await storage.aggregate(Quote, Quote.verification_status, Quote.quality_score)
        return [
            VerificationStat(verification_status=g["key"], count=g["count"], avg_quality=g["avg"])
            for g in groups
        ]

    async def get_source_type_stats(self, storage: StoragePort) -> List[SourceTypeStat]:
        """Count and mean quality score per source type, largest group first."""
        groups = await storage.aggregate(
            Quote, Quote.source_type, Quote.quality_score, order_by_count=True
        )
        return [
            SourceTypeStat(source_type=g["key"], count=g["count"], avg_quality=g["avg"])
            for g in groups
        ]


# ── Singleton Instance ────────────────────────────────────────────────────
# Stateless; the storage port is passed on every call.
quote_service = QuoteService()
