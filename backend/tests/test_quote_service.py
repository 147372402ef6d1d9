"""
Quotebook Backend: Quote Service Tests
=======================================

What:  QuoteService against an in-memory SQLite catalog, plus a mocked
       storage port for the failure path.

What we test:
    ✅ Create/replace/delete with validation and defaults
    ✅ Random selection with category filter and exclusions
    ✅ Field filters and newest-first ordering
    ✅ Free-text and advanced search
    ✅ Suggestions, popular terms, facets and stats
    ✅ Storage failures propagate as StorageError
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from quotebook.exceptions import StorageError, ValidationError
from quotebook.schemas.quote import AdvancedSearchFilters, QuoteCreate
from quotebook.services.quote_service import QuoteService, quote_record


class TestQuoteRecord:

    def test_trims_and_fills_defaults(self):
        record = quote_record(
            QuoteCreate(text="  Padded quote text here  ", author=" Someone ", category="  ")
        )
        assert record["text"] == "Padded quote text here"
        assert record["author"] == "Someone"
        assert record["category"] is None
        assert record["source_type"] == "unknown"
        assert record["verification_status"] == "pending"
        assert record["quality_score"] == 5
        assert record["language"] == "en"


class TestQuoteServiceCrud:

    def setup_method(self):
        self.service = QuoteService()

    @pytest.mark.asyncio
    async def test_create_applies_defaults(self, storage):
        quote = await self.service.create_quote(
            storage, QuoteCreate(text="A brand new quote for the catalog", author="New Author")
        )
        assert quote.id is not None
        assert quote.verification_status == "pending"
        assert quote.quality_score == 5
        assert quote.source_type == "unknown"
        assert quote.is_featured is False
        assert quote.featured_date is None

    @pytest.mark.asyncio
    async def test_create_rejects_with_all_violations(self, storage):
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_quote(storage, QuoteCreate(text="Short", author="A"))
        assert exc_info.value.violations == [
            "Quote text must be at least 10 characters long",
            "Author name must be at least 2 characters long",
        ]
        assert await self.service.count_quotes(storage) == 0

    @pytest.mark.asyncio
    async def test_create_rejects_duplicate(self, storage, sample_quotes):
        first = sample_quotes[0]
        with pytest.raises(ValidationError) as exc_info:
            await self.service.create_quote(
                storage, QuoteCreate(text=first.text.upper(), author=first.author.lower())
            )
        assert exc_info.value.violations == ["This quote already exists in the database"]

    @pytest.mark.asyncio
    async def test_update_replaces_fields(self, storage, sample_quotes):
        target = sample_quotes[3]
        updated = await self.service.update_quote(
            storage,
            target.id,
            QuoteCreate(text=target.text, author=target.author, category="Belief", quality_score=8),
        )
        assert updated.category == "Belief"
        assert updated.quality_score == 8
        # Omitted optional fields reset to their defaults
        assert updated.tags is None

    @pytest.mark.asyncio
    async def test_update_missing_returns_none(self, storage):
        result = await self.service.update_quote(
            storage, 999, QuoteCreate(text="Does not matter at all", author="Nobody")
        )
        assert result is None

    @pytest.mark.asyncio
    async def test_update_into_another_quote_is_duplicate(self, storage, sample_quotes):
        other = sample_quotes[0]
        with pytest.raises(ValidationError):
            await self.service.update_quote(
                storage, sample_quotes[1].id, QuoteCreate(text=other.text, author=other.author)
            )

    @pytest.mark.asyncio
    async def test_delete(self, storage, sample_quotes):
        assert await self.service.delete_quote(storage, sample_quotes[0].id) == 1
        assert await self.service.get_quote(storage, sample_quotes[0].id) is None
        assert await self.service.delete_quote(storage, sample_quotes[0].id) == 0

    @pytest.mark.asyncio
    async def test_list_is_newest_first_with_total(self, storage, sample_quotes):
        page = await self.service.list_quotes(storage, limit=2, offset=0)
        assert page.total == 4
        assert page.has_more is True
        assert [q.id for q in page.quotes] == [sample_quotes[3].id, sample_quotes[2].id]

        last = await self.service.list_quotes(storage, limit=2, offset=2)
        assert last.has_more is False
        assert [q.id for q in last.quotes] == [sample_quotes[1].id, sample_quotes[0].id]


class TestRandomSelection:

    def setup_method(self):
        self.service = QuoteService()

    @pytest.mark.asyncio
    async def test_random_respects_category(self, storage, sample_quotes):
        for _ in range(5):
            quote = await self.service.get_random(storage, category="Success")
            assert quote.category == "Success"

    @pytest.mark.asyncio
    async def test_random_respects_exclusions(self, storage, sample_quotes):
        success_ids = [q.id for q in sample_quotes if q.category == "Success"]
        quote = await self.service.get_random(
            storage, category="Success", exclude_ids=success_ids[:1]
        )
        assert quote.id == success_ids[1]

    @pytest.mark.asyncio
    async def test_random_everything_excluded(self, storage, sample_quotes):
        quote = await self.service.get_random(
            storage, exclude_ids=[q.id for q in sample_quotes]
        )
        assert quote is None

    @pytest.mark.asyncio
    async def test_random_empty_catalog(self, storage):
        assert await self.service.get_random(storage) is None

    @pytest.mark.asyncio
    async def test_multiple_random_returns_all_when_fewer_match(self, storage, sample_quotes):
        quotes = await self.service.get_multiple_random(storage, count=5, category="Success")
        assert len(quotes) == 2
        assert len({q.id for q in quotes}) == 2

    @pytest.mark.asyncio
    async def test_multiple_random_distinct(self, storage, sample_quotes):
        quotes = await self.service.get_multiple_random(storage, count=3)
        assert len(quotes) == 3
        assert len({q.id for q in quotes}) == 3


class TestFilters:

    def setup_method(self):
        self.service = QuoteService()

    @pytest.mark.asyncio
    async def test_category_is_exact(self, storage, sample_quotes):
        assert len(await self.service.get_by_category(storage, "Success")) == 2
        assert await self.service.get_by_category(storage, "success") == []

    @pytest.mark.asyncio
    async def test_author_is_substring(self, storage, sample_quotes):
        quotes = await self.service.get_by_author(storage, "JOBS")
        assert [q.id for q in quotes] == [sample_quotes[1].id, sample_quotes[0].id]

    @pytest.mark.asyncio
    async def test_verification_status(self, storage, sample_quotes):
        quotes = await self.service.get_by_verification_status(storage, "disputed")
        assert [q.author for q in quotes] == ["Albert Einstein"]

    @pytest.mark.asyncio
    async def test_quality_score_best_first(self, storage, sample_quotes):
        quotes = await self.service.get_by_quality_score(storage, 6)
        assert [q.quality_score for q in quotes] == [9, 7, 6]

    @pytest.mark.asyncio
    async def test_source_type(self, storage, sample_quotes):
        speeches = await self.service.get_by_source_type(storage, "speech")
        assert len(speeches) == 2
        unknown = await self.service.get_by_source_type(storage, "unknown")
        assert len(unknown) == 2


class TestSearch:

    def setup_method(self):
        self.service = QuoteService()

    @pytest.mark.asyncio
    async def test_search_matches_any_field(self, storage, sample_quotes):
        by_text = await self.service.search(storage, "HUNGRY")
        by_tag = await self.service.search(storage, "curiosity")
        by_category = await self.service.search(storage, "opportun")
        assert [q.id for q in by_text] == [sample_quotes[1].id]
        assert [q.id for q in by_tag] == [sample_quotes[1].id]
        assert [q.id for q in by_category] == [sample_quotes[2].id]

    @pytest.mark.asyncio
    async def test_explicit_zero_limit_returns_nothing(self, storage, sample_quotes):
        assert await self.service.search(storage, "a", limit=0) == []
        assert await self.service.get_by_category(storage, "Success", limit=0) == []
        assert await self.service.get_search_suggestions(storage, "s", limit=0) == []

    @pytest.mark.asyncio
    async def test_omitted_limit_uses_page_size(self, storage, sample_quotes):
        assert len(await self.service.search(storage, "e")) == 4

    @pytest.mark.asyncio
    async def test_search_treats_wildcards_literally(self, storage, sample_quotes):
        assert await self.service.search(storage, "%") == []

    @pytest.mark.asyncio
    async def test_advanced_search_is_conjunctive(self, storage, sample_quotes):
        filters = AdvancedSearchFilters(category="Success", author="jobs")
        quotes = await self.service.advanced_search(storage, filters)
        assert [q.id for q in quotes] == [sample_quotes[0].id]

    @pytest.mark.asyncio
    async def test_advanced_search_requires_every_tag(self, storage, sample_quotes):
        filters = AdvancedSearchFilters(tags="work, passion")
        quotes = await self.service.advanced_search(storage, filters)
        assert [q.id for q in quotes] == [sample_quotes[0].id]

        filters = AdvancedSearchFilters(tags=["work", "curiosity"])
        assert await self.service.advanced_search(storage, filters) == []

    @pytest.mark.asyncio
    async def test_advanced_search_date_range(self, storage, sample_quotes):
        now = datetime.now(timezone.utc)
        inside = AdvancedSearchFilters(
            date_from=now - timedelta(days=1), date_to=now + timedelta(days=1)
        )
        assert len(await self.service.advanced_search(storage, inside)) == 4

        future = AdvancedSearchFilters(date_from=now + timedelta(days=1))
        assert await self.service.advanced_search(storage, future) == []

    def test_empty_filters(self):
        assert AdvancedSearchFilters(search_term="  ", tags=" , ").is_empty()
        assert not AdvancedSearchFilters(author="x").is_empty()

    @pytest.mark.asyncio
    async def test_suggestions_authors_then_categories(self, storage, sample_quotes):
        suggestions = await self.service.get_search_suggestions(storage, "s", limit=4)
        types = [s.type for s in suggestions]
        assert types == sorted(types)
        assert types.count("author") <= 2
        assert types.count("category") <= 2
        assert len(suggestions) <= 4

    @pytest.mark.asyncio
    async def test_suggestions_are_distinct(self, storage, sample_quotes):
        suggestions = await self.service.get_search_suggestions(storage, "jobs", limit=10)
        assert [(s.suggestion, s.type) for s in suggestions] == [("Steve Jobs", "author")]

    @pytest.mark.asyncio
    async def test_popular_terms(self, storage, sample_quotes):
        terms = await self.service.get_popular_search_terms(storage, limit=1)
        assert terms[0].term == "Steve Jobs"
        assert terms[0].count == 2


class TestFacetsAndStats:

    def setup_method(self):
        self.service = QuoteService()

    @pytest.mark.asyncio
    async def test_categories_sorted_distinct(self, storage, sample_quotes):
        assert await self.service.get_categories(storage) == ["Learning", "Opportunity", "Success"]

    @pytest.mark.asyncio
    async def test_authors_sorted_distinct(self, storage, sample_quotes):
        assert await self.service.get_authors(storage) == [
            "Albert Einstein",
            "Steve Jobs",
            "Theodore Roosevelt",
        ]

    @pytest.mark.asyncio
    async def test_verification_stats(self, storage, sample_quotes):
        stats = {s.verification_status: s for s in await self.service.get_verification_stats(storage)}
        assert stats["verified"].count == 2
        assert stats["verified"].avg_quality == pytest.approx(8.0)
        assert stats["pending"].count == 1
        assert stats["disputed"].avg_quality == pytest.approx(6.0)

    @pytest.mark.asyncio
    async def test_source_type_stats_largest_first(self, storage, sample_quotes):
        stats = await self.service.get_source_type_stats(storage)
        assert {s.source_type for s in stats} == {"speech", "unknown"}
        speech = next(s for s in stats if s.source_type == "speech")
        assert speech.avg_quality == pytest.approx(8.0)
        unknown = next(s for s in stats if s.source_type == "unknown")
        assert unknown.avg_quality == pytest.approx(5.0)


class TestStorageFailures:

    @pytest.mark.asyncio
    async def test_storage_error_propagates(self):
        storage = MagicMock()
        storage.query_one = AsyncMock(side_effect=StorageError(context={"operation": "query_one"}))
        with pytest.raises(StorageError):
            await QuoteService().get_random(storage)
