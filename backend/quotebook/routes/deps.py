"""
Quotebook Backend: Route Dependencies
======================================

What:  Binds a storage port to the request's database session.
How:   FastAPI resolves get_db_session first (commit/rollback per request),
       then wraps that session in SQLAlchemyStorage for the services.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from quotebook.database import get_db_session
from quotebook.services.storage import SQLAlchemyStorage


async def get_storage(db: AsyncSession = Depends(get_db_session)) -> SQLAlchemyStorage:
    return SQLAlchemyStorage(db)


def parse_id_list(raw: str | None) -> list[int]:
    """'3, 7,x,9' -> [3, 7, 9]; entries that are not integers are dropped."""
    if not raw:
        return []
    ids = []
    for part in raw.split(","):
        part = part.strip()
        if part.lstrip("-").isdigit():
            ids.append(int(part))
    return ids
