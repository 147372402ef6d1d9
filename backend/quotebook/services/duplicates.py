"""
Quotebook Backend: Duplicate / Near-Duplicate Detector
=======================================================

What:  Two independent checks against the stored catalog:
         - find_exact_duplicates(): text AND author equal after trim + lowercase
         - find_similar_quotes(): normalized Levenshtein similarity of the
           lowercased text at or above a threshold
Who:   The validation engine (exact check, on every insert/replace) and the
       /api/quotes/similar endpoint (near-duplicate check).

Scaling note:
    find_similar_quotes is a full scan with no early exit and no index, which
    is fine for a catalog of a few thousand quotes. Pass `author` or
    `category` to narrow the scan before scoring.
"""

import logging
from typing import List, Optional

from sqlalchemy import func, literal

from quotebook.config import settings
from quotebook.models.quote import Quote
from quotebook.services.similarity import similarity
from quotebook.services.storage import StoragePort

logger = logging.getLogger(__name__)


def _normalized(value):
    return func.lower(func.trim(value))


async def find_exact_duplicates(
    storage: StoragePort,
    text: str,
    author: str,
    exclude_id: Optional[int] = None,
) -> List[Quote]:
    """
    Stored quotes whose text and author both match, ignoring case and
    surrounding whitespace.

    Normalization runs in SQL on both sides so the stored column and the
    candidate go through the same lower()/trim().

    More than one match is possible for data written before validation
    existed; all of them are returned.
    """
    where = [
        _normalized(Quote.text) == _normalized(literal(text)),
        _normalized(Quote.author) == _normalized(literal(author)),
    ]
    if exclude_id is not None:
        where.append(Quote.id != exclude_id)
    return await storage.query_many(Quote, where=where)


async def find_similar_quotes(
    storage: StoragePort,
    text: str,
    threshold: Optional[float] = None,
    author: Optional[str] = None,
    category: Optional[str] = None,
) -> List[Quote]:
    """
    Every stored quote q with similarity(lower(q.text), lower(text)) >= threshold.

    Args:
        storage: Storage port to scan
        text: Candidate quote text
        threshold: Minimum similarity in [0, 1]; defaults to
                   settings.similarity_threshold (0.85)
        author: Optional case-insensitive substring pre-filter
        category: Optional exact-match pre-filter

    Raises:
        StorageError: The scan failed (not retried)
    """
    if threshold is None:
        threshold = settings.similarity_threshold

    where = []
    if author:
        where.append(Quote.author.icontains(author, autoescape=True))
    if category:
        where.append(Quote.category == category)

    candidate = text.lower()
    rows = await storage.query_many(Quote, where=where)
    matches = [q for q in rows if similarity(candidate, q.text.lower()) >= threshold]

    logger.debug(
        "Similarity scan: %d scanned, %d at or above %.2f", len(rows), len(matches), threshold
    )
    return matches
