"""
Quotebook Backend: Quote Route Handlers
========================================

What:  HTTP endpoints for the quote catalog under /api/quotes.
How:   Parse query/body parameters, call QuoteService or the daily
       selector with a request-scoped storage port, shape the response.

Routes are thin: validation rules, query semantics and selection policies
all live in the services. The only decisions made here are HTTP ones:
None becomes 404, and an advanced search with no filters is rejected
before it reaches the service.

Fixed paths (/random, /daily, /search, ...) are declared before
/{quote_id} so they are not captured by the id route.
"""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response

from quotebook.config import settings
from quotebook.exceptions import NotFoundError, ValidationError
from quotebook.routes.deps import get_storage, parse_id_list
from quotebook.schemas.common import DeleteResponse, ErrorResponse
from quotebook.schemas.quote import (
    AdvancedSearchFilters,
    PopularTerm,
    QuoteCreate,
    QuoteListResponse,
    QuoteResponse,
    QuoteSearchResponse,
    RandomQuotesResponse,
    SimilarQuotesResponse,
    SourceTypeStat,
    Suggestion,
    VerificationStat,
)
from quotebook.services.daily_quote import daily_quote_selector
from quotebook.services.quote_service import quote_service
from quotebook.services.storage import SQLAlchemyStorage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/quotes", tags=["Quotes"])

_errors = {
    400: {"description": "Validation failed", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


@router.get("", response_model=QuoteListResponse, responses=_errors, summary="List quotes")
async def list_quotes(
    response: Response,
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    category: Optional[str] = Query(default=None, description="Exact category"),
    author: Optional[str] = Query(default=None, description="Author substring"),
    storage: SQLAlchemyStorage = Depends(get_storage),
) -> QuoteListResponse:
    """
    Newest-first page of quotes. A category filter takes precedence over an
    author filter; `total` always reports the whole catalog.
    """
    if category or author:
        if category:
            quotes = await quote_service.get_by_category(storage, category.strip(), limit, offset)
        else:
            quotes = await quote_service.get_by_author(storage, author.strip(), limit, offset)
        total = await quote_service.count_quotes(storage)
        result = QuoteListResponse(
            quotes=quotes, limit=limit, offset=offset, total=total, has_more=offset + limit < total
        )
    else:
        result = await quote_service.list_quotes(storage, limit=limit, offset=offset)

    response.headers["X-Total-Count"] = str(result.total)
    return result


@router.get(
    "/random",
    response_model=RandomQuotesResponse,
    response_model_exclude_none=True,
    responses={404: {"description": "No quotes matched", "model": ErrorResponse}},
    summary="Random quote(s)",
)
async def random_quotes(
    category: Optional[str] = Query(default=None),
    exclude: Optional[str] = Query(default=None, description="Comma-separated quote ids to skip"),
    count: int = Query(default=1, ge=1, le=10),
    storage: SQLAlchemyStorage = Depends(get_storage),
) -> RandomQuotesResponse:
    exclude_ids = parse_id_list(exclude)
    category = category.strip() if category else None

    if count > 1:
        quotes = await quote_service.get_multiple_random(storage, count, category, exclude_ids)
        if not quotes:
            raise NotFoundError(resource="quote")
        return RandomQuotesResponse(quotes=quotes)

    quote = await quote_service.get_random(storage, category, exclude_ids)
    if quote is None:
        raise NotFoundError(resource="quote")
    return RandomQuotesResponse(quote=quote)


@router.get(
    "/daily",
    response_model=QuoteResponse,
    responses={404: {"description": "Catalog is empty", "model": ErrorResponse}},
    summary="Quote of the day (UTC)",
)
async def daily_quote(storage: SQLAlchemyStorage = Depends(get_storage)) -> QuoteResponse:
    quote = await daily_quote_selector.get_daily_quote(storage)
    if quote is None:
        raise NotFoundError(resource="daily quote")
    return quote


@router.get("/search", response_model=QuoteSearchResponse, summary="Free-text search")
async def search_quotes(
    q: str = Query(min_length=1, max_length=100),
    limit: int = Query(default=20, ge=1, le=50),
    storage: SQLAlchemyStorage = Depends(get_storage),
) -> QuoteSearchResponse:
    quotes = await quote_service.search(storage, q, limit)
    return QuoteSearchResponse(quotes=quotes, search_term=q, count=len(quotes))


@router.get(
    "/advanced-search",
    response_model=QuoteSearchResponse,
    responses=_errors,
    summary="Conjunctive multi-field search",
)
async def advanced_search(
    search_term: Optional[str] = Query(default=None, alias="searchTerm", max_length=100),
    category: Optional[str] = Query(default=None, max_length=50),
    author: Optional[str] = Query(default=None, max_length=100),
    tags: Optional[str] = Query(default=None, max_length=200, description="Comma-separated"),
    date_from: Optional[datetime] = Query(default=None, alias="dateFrom"),
    date_to: Optional[datetime] = Query(default=None, alias="dateTo"),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    storage: SQLAlchemyStorage = Depends(get_storage),
) -> QuoteSearchResponse:
    filters = AdvancedSearchFilters(
        search_term=search_term,
        category=category,
        author=author,
        tags=tags,
        date_from=date_from,
        date_to=date_to,
    )
    if filters.is_empty():
        raise ValidationError(["At least one search filter is required"])

    quotes = await quote_service.advanced_search(storage, filters, limit, offset)
    return QuoteSearchResponse(quotes=quotes, search_term=search_term, count=len(quotes))


@router.get("/suggestions", response_model=List[Suggestion], summary="Autocomplete")
async def suggestions(
    q: str = Query(min_length=1, max_length=50),
    limit: int = Query(default=10, ge=1, le=20),
    storage: SQLAlchemyStorage = Depends(get_storage),
) -> List[Suggestion]:
    return await quote_service.get_search_suggestions(storage, q, limit)


@router.get("/popular-terms", response_model=List[PopularTerm])
async def popular_terms(
    limit: int = Query(default=10, ge=1, le=50),
    storage: SQLAlchemyStorage = Depends(get_storage),
) -> List[PopularTerm]:
    return await quote_service.get_popular_search_terms(storage, limit)


@router.get("/categories", response_model=List[str])
async def categories(storage: SQLAlchemyStorage = Depends(get_storage)) -> List[str]:
    return await quote_service.get_categories(storage)


@router.get("/authors", response_model=List[str])
async def authors(storage: SQLAlchemyStorage = Depends(get_storage)) -> List[str]:
    return await quote_service.get_authors(storage)


@router.get("/similar", response_model=SimilarQuotesResponse, summary="Near-duplicate lookup")
async def similar_quotes(
    text: str = Query(min_length=1, max_length=1000),
    threshold: Optional[float] = Query(default=None, ge=0.0, le=1.0),
    author: Optional[str] = Query(default=None, description="Narrow the scan by author substring"),
    category: Optional[str] = Query(default=None, description="Narrow the scan by category"),
    storage: SQLAlchemyStorage = Depends(get_storage),
) -> SimilarQuotesResponse:
    effective = settings.similarity_threshold if threshold is None else threshold
    quotes = await quote_service.find_similar(storage, text, effective, author, category)
    return SimilarQuotesResponse(quotes=quotes, threshold=effective, count=len(quotes))


@router.get("/stats/verification", response_model=List[VerificationStat])
async def verification_stats(
    storage: SQLAlchemyStorage = Depends(get_storage),
) -> List[VerificationStat]:
    return await quote_service.get_verification_stats(storage)


@router.get("/stats/source-types", response_model=List[SourceTypeStat])
async def source_type_stats(
    storage: SQLAlchemyStorage = Depends(get_storage),
) -> List[SourceTypeStat]:
    return await quote_service.get_source_type_stats(storage)


@router.get(
    "/{quote_id}",
    response_model=QuoteResponse,
    responses={404: {"description": "Quote not found", "model": ErrorResponse}},
)
async def get_quote(
    quote_id: int, storage: SQLAlchemyStorage = Depends(get_storage)
) -> QuoteResponse:
    quote = await quote_service.get_quote(storage, quote_id)
    if quote is None:
        raise NotFoundError(resource="quote", resource_id=str(quote_id))
    return quote


@router.post("", response_model=QuoteResponse, status_code=201, responses=_errors)
async def create_quote(
    payload: QuoteCreate, storage: SQLAlchemyStorage = Depends(get_storage)
) -> QuoteResponse:
    return await quote_service.create_quote(storage, payload)


@router.put(
    "/{quote_id}",
    response_model=QuoteResponse,
    responses={**_errors, 404: {"description": "Quote not found", "model": ErrorResponse}},
)
async def replace_quote(
    quote_id: int, payload: QuoteCreate, storage: SQLAlchemyStorage = Depends(get_storage)
) -> QuoteResponse:
    quote = await quote_service.update_quote(storage, quote_id, payload)
    if quote is None:
        raise NotFoundError(resource="quote", resource_id=str(quote_id))
    return quote


@router.delete(
    "/{quote_id}",
    response_model=DeleteResponse,
    responses={404: {"description": "Quote not found", "model": ErrorResponse}},
)
async def delete_quote(
    quote_id: int, storage: SQLAlchemyStorage = Depends(get_storage)
) -> DeleteResponse:
    changes = await quote_service.delete_quote(storage, quote_id)
    if not changes:
        raise NotFoundError(resource="quote", resource_id=str(quote_id))
    return DeleteResponse(deleted_id=quote_id, changes=changes)
