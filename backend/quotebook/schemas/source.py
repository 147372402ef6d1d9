"""
Quotebook Backend: Source Request/Response Schemas
===================================================

What:  Pydantic models for the sources API. As with quotes, request
       bodies only carry types; the validation engine owns the rules.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class SourceCreate(BaseModel):
    """Full source record sent on create (POST) and replace (PUT)."""
    title: Optional[str] = Field(default=None, description="Source title (min 2 characters)")
    author: Optional[str] = None
    publication_year: Optional[int] = Field(default=None, description="1000 up to the current year")
    publisher: Optional[str] = None
    isbn: Optional[str] = None
    url: Optional[str] = Field(default=None, description="Absolute http(s) URL")
    source_type: Optional[str] = Field(default=None, description="book, speech, article, ...")
    credibility_rating: Optional[int] = Field(default=5, description="Credibility (1-10)")
    description: Optional[str] = None


class SourceResponse(BaseModel):
    id: int
    title: str
    author: Optional[str] = None
    publication_year: Optional[int] = None
    publisher: Optional[str] = None
    isbn: Optional[str] = None
    url: Optional[str] = None
    source_type: str
    credibility_rating: int
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class SourceListResponse(BaseModel):
    sources: List[SourceResponse]
    limit: int
    offset: int
    total: int
    has_more: bool
