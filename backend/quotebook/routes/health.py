"""
Quotebook Backend: Health Check Route
======================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Counts the catalog through the storage port. A reachable database
       means "healthy"; a StorageError means "unhealthy" with HTTP 503.
"""

import logging
import time

from fastapi import APIRouter, Depends, Response

from quotebook import __version__
from quotebook.exceptions import StorageError
from quotebook.routes.deps import get_storage
from quotebook.schemas.common import HealthResponse
from quotebook.services.quote_service import quote_service
from quotebook.services.storage import SQLAlchemyStorage

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
)
async def health_check(
    response: Response, storage: SQLAlchemyStorage = Depends(get_storage)
) -> HealthResponse:
    """
    The storage failure is handled here rather than by the global handler,
    so probes get a health body with status 503 instead of the error envelope.
    """
    db_status = "connected"
    overall = "healthy"
    quote_count = None

    try:
        quote_count = await quote_service.count_quotes(storage)
    except StorageError as e:
        db_status = "disconnected"
        overall = "unhealthy"
        response.status_code = 503
        logger.warning("Health check: database unreachable: %s", e.context)

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        quote_count=quote_count,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
