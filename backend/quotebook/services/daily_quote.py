"""
Quotebook Backend: Daily Quote Selector
========================================

What:  Picks one quote per calendar day and keeps returning it for the rest
       of that day.
How:   Two states per day:

         needs-pick ──(pick random not-today quote, stamp featured_date)──▶ has-today's-pick
         has-today's-pick ──(any call)──▶ has-today's-pick

Day boundary:
    The UTC calendar date. A server in any timezone rolls over at 00:00 UTC.

Race handling:
    The stamp is a conditional update that only succeeds while the picked
    row is still not featured today. That makes the stamp itself atomic, but
    two first-of-the-day calls can still each stamp a different quote. When
    that happens both quotes carry today's date and later calls return
    whichever the lookup finds first.

Featured flag:
    Only featured_date is written. is_featured keeps whatever value the
    record was stored with.

Rotation:
    Pure random among quotes not featured today. There is no weighting
    toward least-recently-featured quotes, so yesterday's quote can repeat.
"""

import logging
from datetime import date, datetime, timezone
from typing import Callable, Optional

from sqlalchemy import func, or_

from quotebook.models.quote import Quote
from quotebook.schemas.quote import QuoteResponse
from quotebook.services.storage import StoragePort

logger = logging.getLogger(__name__)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


class DailyQuoteSelector:
    """
    Deterministic-per-day quote selection over a storage port.

    Args:
        today: Clock returning the current UTC date (tests pass a fixed one)
    """

    def __init__(self, today: Callable[[], date] = utc_today):
        self._today = today

    async def get_daily_quote(self, storage: StoragePort) -> Optional[QuoteResponse]:
        """
        Today's quote, picking and stamping one on the first call of the day.

        Returns:
            The daily quote, or None when the catalog is empty.

        Raises:
            StorageError: Lookup or stamp failed
        """
        today = self._today()

        featured = await self._featured_on(storage, today)
        if featured is not None:
            return QuoteResponse.model_validate(featured)

        not_today = or_(Quote.featured_date.is_(None), Quote.featured_date != today)
        candidate = await storage.query_one(
            Quote, where=[not_today], order_by=(func.random(),)
        )
        if candidate is None:
            logger.info("No quotes available for %s", today.isoformat())
            return None

        stamped = await storage.update(
            Quote,
            candidate.id,
            {"featured_date": today},
            where=[not_today],
        )
        if stamped:
            logger.info("Quote %s featured for %s", candidate.id, today.isoformat())
            chosen = await storage.query_one(Quote, where=[Quote.id == candidate.id])
        else:
            # Another caller stamped this row first
            logger.info("Daily pick for %s raced; re-reading", today.isoformat())
            chosen = await self._featured_on(storage, today)

        return QuoteResponse.model_validate(chosen) if chosen is not None else None

    async def _featured_on(self, storage: StoragePort, day: date) -> Optional[Quote]:
        return await storage.query_one(
            Quote, where=[Quote.featured_date == day], order_by=(Quote.id,)
        )


daily_quote_selector = DailyQuoteSelector()
