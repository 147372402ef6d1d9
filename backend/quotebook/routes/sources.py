"""
Quotebook Backend: Source Route Handlers
=========================================

What:  HTTP endpoints for provenance sources under /api/sources.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from quotebook.exceptions import NotFoundError
from quotebook.routes.deps import get_storage
from quotebook.schemas.common import DeleteResponse, ErrorResponse
from quotebook.schemas.quote import QuoteResponse
from quotebook.schemas.source import SourceCreate, SourceListResponse, SourceResponse
from quotebook.services.source_service import source_service
from quotebook.services.storage import SQLAlchemyStorage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sources", tags=["Sources"])

_not_found = {404: {"description": "Source not found", "model": ErrorResponse}}


@router.get("", response_model=SourceListResponse)
async def list_sources(
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    source_type: Optional[str] = Query(default=None, alias="type"),
    min_rating: Optional[int] = Query(default=None, ge=1, le=10),
    storage: SQLAlchemyStorage = Depends(get_storage),
) -> SourceListResponse:
    """Most credible first. `type` and `min_rating` narrow the list."""
    if source_type or min_rating:
        if source_type:
            sources = await source_service.get_by_type(storage, source_type, limit)
        else:
            sources = await source_service.get_by_credibility_rating(storage, min_rating, limit)
        total = await source_service.count_sources(storage)
        return SourceListResponse(
            sources=sources, limit=limit, offset=0, total=total, has_more=limit < total
        )
    return await source_service.list_sources(storage, limit=limit, offset=offset)


@router.get("/search", response_model=List[SourceResponse])
async def search_sources(
    q: str = Query(min_length=1, max_length=100),
    limit: int = Query(default=20, ge=1, le=50),
    storage: SQLAlchemyStorage = Depends(get_storage),
) -> List[SourceResponse]:
    return await source_service.search(storage, q, limit)


@router.get("/types", response_model=List[str])
async def source_types(storage: SQLAlchemyStorage = Depends(get_storage)) -> List[str]:
    return await source_service.get_source_types(storage)


@router.get("/high-credibility", response_model=List[SourceResponse])
async def high_credibility(
    min_rating: int = Query(default=7, ge=1, le=10),
    storage: SQLAlchemyStorage = Depends(get_storage),
) -> List[SourceResponse]:
    return await source_service.get_high_credibility_sources(storage, min_rating)


@router.get("/{source_id}", response_model=SourceResponse, responses=_not_found)
async def get_source(
    source_id: int, storage: SQLAlchemyStorage = Depends(get_storage)
) -> SourceResponse:
    source = await source_service.get_source(storage, source_id)
    if source is None:
        raise NotFoundError(resource="source", resource_id=str(source_id))
    return source


@router.get("/{source_id}/quotes", response_model=List[QuoteResponse], responses=_not_found)
async def quotes_for_source(
    source_id: int,
    limit: int = Query(default=20, ge=1, le=100),
    storage: SQLAlchemyStorage = Depends(get_storage),
) -> List[QuoteResponse]:
    quotes = await source_service.get_quotes_by_source(storage, source_id, limit)
    if quotes is None:
        raise NotFoundError(resource="source", resource_id=str(source_id))
    return quotes


@router.post("", response_model=SourceResponse, status_code=201)
async def create_source(
    payload: SourceCreate, storage: SQLAlchemyStorage = Depends(get_storage)
) -> SourceResponse:
    return await source_service.create_source(storage, payload)


@router.put("/{source_id}", response_model=SourceResponse, responses=_not_found)
async def replace_source(
    source_id: int, payload: SourceCreate, storage: SQLAlchemyStorage = Depends(get_storage)
) -> SourceResponse:
    source = await source_service.update_source(storage, source_id, payload)
    if source is None:
        raise NotFoundError(resource="source", resource_id=str(source_id))
    return source


@router.delete("/{source_id}", response_model=DeleteResponse, responses=_not_found)
async def delete_source(
    source_id: int, storage: SQLAlchemyStorage = Depends(get_storage)
) -> DeleteResponse:
    changes = await source_service.delete_source(storage, source_id)
    if not changes:
        raise NotFoundError(resource="source", resource_id=str(source_id))
    return DeleteResponse(deleted_id=source_id, changes=changes)
