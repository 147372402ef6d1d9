"""
Quotebook Backend: Duplicate Detector Tests
============================================

Runs against a real in-memory SQLite catalog.

What we test:
    ✅ Exact duplicates: text AND author, case/whitespace-insensitive
    ✅ Near-duplicates: threshold inclusive, case-insensitive, full scan
    ✅ Optional author/category narrowing of the scan
"""

import pytest

from quotebook.schemas.quote import QuoteCreate
from quotebook.services.duplicates import find_exact_duplicates, find_similar_quotes
from quotebook.services.quote_service import quote_service
from quotebook.services.similarity import similarity


class TestExactDuplicates:

    @pytest.mark.asyncio
    async def test_finds_match_ignoring_case_and_padding(self, storage, sample_quotes):
        found = await find_exact_duplicates(
            storage, "  in the middle of DIFFICULTY lies opportunity. ", "ALBERT EINSTEIN"
        )
        assert [q.id for q in found] == [sample_quotes[2].id]

    @pytest.mark.asyncio
    async def test_author_must_match_too(self, storage, sample_quotes):
        found = await find_exact_duplicates(storage, sample_quotes[2].text, "Anonymous")
        assert found == []

    @pytest.mark.asyncio
    async def test_exclude_id(self, storage, sample_quotes):
        target = sample_quotes[2]
        found = await find_exact_duplicates(
            storage, target.text, target.author, exclude_id=target.id
        )
        assert found == []

    @pytest.mark.asyncio
    async def test_empty_catalog(self, storage):
        assert await find_exact_duplicates(storage, "Anything at all here", "Nobody") == []


class TestSimilarQuotes:

    @pytest.mark.asyncio
    async def test_near_duplicate_above_threshold(self, storage, sample_quotes):
        """One word off a 54-character quote is well above 0.8."""
        found = await find_similar_quotes(
            storage, "The only way to do great work is to love what you make.", threshold=0.8
        )
        assert [q.id for q in found] == [sample_quotes[0].id]

    @pytest.mark.asyncio
    async def test_comparison_ignores_case(self, storage, sample_quotes):
        found = await find_similar_quotes(
            storage, sample_quotes[2].text.upper(), threshold=1.0
        )
        assert [q.id for q in found] == [sample_quotes[2].id]

    @pytest.mark.asyncio
    async def test_threshold_is_inclusive(self, storage):
        await quote_service.create_quote(
            storage, QuoteCreate(text="The quick brown fox", author="Test Author")
        )
        # 17/19 exactly
        found = await find_similar_quotes(storage, "The quick brown dog", threshold=17 / 19)
        assert len(found) == 1
        found = await find_similar_quotes(storage, "The quick brown dog", threshold=0.9)
        assert found == []

    @pytest.mark.asyncio
    async def test_unrelated_text_matches_nothing(self, storage, sample_quotes):
        found = await find_similar_quotes(storage, "Completely unrelated words", threshold=0.8)
        assert found == []

    @pytest.mark.asyncio
    async def test_zero_threshold_returns_everything(self, storage, sample_quotes):
        found = await find_similar_quotes(storage, "x", threshold=0.0)
        assert len(found) == len(sample_quotes)

    @pytest.mark.asyncio
    async def test_default_threshold_from_settings(self, storage, sample_quotes):
        found = await find_similar_quotes(storage, sample_quotes[3].text)
        assert [q.id for q in found] == [sample_quotes[3].id]

    @pytest.mark.asyncio
    async def test_author_narrows_scan(self, storage, sample_quotes):
        found = await find_similar_quotes(
            storage, sample_quotes[0].text, threshold=0.0, author="jobs"
        )
        assert {q.author for q in found} == {"Steve Jobs"}

    @pytest.mark.asyncio
    async def test_category_narrows_scan(self, storage, sample_quotes):
        found = await find_similar_quotes(
            storage, sample_quotes[0].text, threshold=0.0, category="Success"
        )
        assert {q.category for q in found} == {"Success"}
        assert len(found) == 2


class TestDetectorAgainstStoredQuote:

    @pytest.mark.asyncio
    async def test_padded_uppercase_pair_matches_once(self, storage):
        await quote_service.create_quote(
            storage,
            QuoteCreate(text="This is a test quote for duplicate detection.", author="Test Author"),
        )
        found = await find_exact_duplicates(
            storage, " THIS IS A TEST QUOTE FOR DUPLICATE DETECTION. ", " test author "
        )
        assert len(found) == 1
        assert await find_exact_duplicates(storage, "A different quote entirely", "Other") == []

    @pytest.mark.asyncio
    async def test_result_is_exactly_the_quotes_at_or_above_threshold(self, storage, sample_quotes):
        query = "Stay hungry, stay curious, never stop learning"
        threshold = 0.5
        expected = {
            q.id for q in sample_quotes if similarity(q.text.lower(), query.lower()) >= threshold
        }
        found = await find_similar_quotes(storage, query, threshold=threshold)
        assert {q.id for q in found} == expected
