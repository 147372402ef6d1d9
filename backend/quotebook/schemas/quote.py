"""
Quotebook Backend: Quote Request/Response Schemas
==================================================

What:  Pydantic models defining the quote API contract.
How:   FastAPI uses these models to parse request bodies, serialize
       responses, and generate the OpenAPI documentation.

Request bodies are deliberately loose (types only, every field optional):
length limits, enums and URL shape are business rules owned by the
validation engine, which reports every violation at once instead of
FastAPI's per-field 422.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class QuoteCreate(BaseModel):
    """
    Full quote record sent on create (POST) and replace (PUT).

    Replace semantics: omitted optional fields fall back to the defaults
    below, exactly as on create.
    """
    text: Optional[str] = Field(default=None, description="Quote text (10-1000 characters)")
    author: Optional[str] = Field(default=None, description="Author name (2-100 characters)")
    category: Optional[str] = Field(default=None, description="Category (max 50 characters)")
    tags: Optional[str] = Field(default=None, description="Comma-separated tags (max 200 characters)")
    source_title: Optional[str] = Field(default=None, description="Title of the cited source")
    source_url: Optional[str] = Field(default=None, description="Absolute http(s) URL of the source")
    source_type: Optional[str] = Field(default="unknown", description="book, speech, article, ...")
    verification_status: Optional[str] = Field(
        default="pending", description="verified, pending, or disputed"
    )
    quality_score: Optional[int] = Field(default=5, description="Editorial quality score (1-10)")
    language: Optional[str] = Field(default="en", description="ISO language code")
    context_notes: Optional[str] = Field(default=None, description="Free-text context")


class AdvancedSearchFilters(BaseModel):
    """
    Conjunctive filter set for advanced search.

    Every filter is optional; absent filters are left out of the
    conjunction. A filter set with nothing in it would match the whole
    catalog, so callers check `is_empty()` and reject such requests.
    """
    search_term: Optional[str] = Field(default=None, max_length=100)
    category: Optional[str] = Field(default=None, max_length=50)
    author: Optional[str] = Field(default=None, max_length=100)
    tags: List[str] = Field(default_factory=list)
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, v):
        """Accepts either a list of fragments or a comma-separated string."""
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        return [tag.strip() for tag in v if tag and tag.strip()]

    @field_validator("search_term", "category", "author", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def is_empty(self) -> bool:
        return not any(
            (self.search_term, self.category, self.author, self.tags, self.date_from, self.date_to)
        )


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class QuoteResponse(BaseModel):
    """Full representation of a stored quote."""
    id: int
    text: str
    author: str
    category: Optional[str] = None
    tags: Optional[str] = None
    source_title: Optional[str] = None
    source_url: Optional[str] = None
    source_type: Optional[str] = None
    verification_status: str
    quality_score: int
    language: str
    context_notes: Optional[str] = None
    is_featured: bool = False
    featured_date: Optional[date] = None
    date_added: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class QuoteListResponse(BaseModel):
    """Limit/offset page of quotes."""
    quotes: List[QuoteResponse]
    limit: int
    offset: int
    total: int = Field(description="Total number of quotes in the catalog")
    has_more: bool


class QuoteSearchResponse(BaseModel):
    quotes: List[QuoteResponse]
    search_term: Optional[str] = None
    count: int


class RandomQuotesResponse(BaseModel):
    """Either a single `quote` or a list of `quotes`, depending on count."""
    quote: Optional[QuoteResponse] = None
    quotes: Optional[List[QuoteResponse]] = None


class SimilarQuotesResponse(BaseModel):
    quotes: List[QuoteResponse]
    threshold: float
    count: int


class Suggestion(BaseModel):
    """One autocomplete entry, tagged with the field it came from."""
    suggestion: str
    type: str = Field(description="author or category")


class PopularTerm(BaseModel):
    term: str
    count: int
    type: str = "author"


class VerificationStat(BaseModel):
    verification_status: Optional[str]
    count: int
    avg_quality: Optional[float]


class SourceTypeStat(BaseModel):
    source_type: Optional[str]
    count: int
    avg_quality: Optional[float]
