"""
Quotebook Backend: Sample Seed Tests
"""

import pytest

from quotebook.services.quote_service import quote_service
from quotebook.services.seed import SAMPLE_QUOTES, SAMPLE_SOURCES, seed_database
from quotebook.services.source_service import source_service


@pytest.mark.asyncio
async def test_seed_fills_empty_catalog(storage):
    inserted = await seed_database(storage)
    assert inserted == len(SAMPLE_QUOTES)
    assert await quote_service.count_quotes(storage) == len(SAMPLE_QUOTES)
    assert await source_service.count_sources(storage) == len(SAMPLE_SOURCES)


@pytest.mark.asyncio
async def test_seed_skips_populated_catalog(storage, sample_quotes):
    assert await seed_database(storage) == 0
    assert await quote_service.count_quotes(storage) == len(sample_quotes)
