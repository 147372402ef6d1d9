"""
Quotebook Backend: Validation Engine
=====================================

What:  Field rules for quote and source records, returning every violation
       as an ordered list of human-readable messages.
How:   Two stages for quotes:
         1. check_quote_fields(): pure shape checks on the record
         2. validate_quote(): the field checks plus a duplicate-existence
            read against storage, appended last
       Sources only have the pure stage (validate_source()).
Who:   QuoteService and SourceService, before every insert and replace.

Validation never short-circuits: a record with five problems yields five
messages, in the order the rules are listed below.

The duplicate read is the one side effect. Two concurrent inserts of the
same quote can both pass it before either commits; nothing here prevents
that.
"""

import logging
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional

from pydantic import AnyHttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from quotebook.models.quote import VERIFICATION_STATUSES
from quotebook.services.duplicates import find_exact_duplicates
from quotebook.services.storage import StoragePort

logger = logging.getLogger(__name__)

_http_url = TypeAdapter(AnyHttpUrl)

# ── Limits ────────────────────────────────────────────────────────────────
QUOTE_TEXT_MIN = 10
QUOTE_TEXT_MAX = 1000
AUTHOR_MIN = 2
AUTHOR_MAX = 100
CATEGORY_MAX = 50
TAGS_MAX = 200
SCORE_MIN, SCORE_MAX = 1, 10
SOURCE_TITLE_MIN = 2
SOURCE_TYPE_MIN = 2
PUBLICATION_YEAR_MIN = 1000

DUPLICATE_MESSAGE = "This quote already exists in the database"


def is_valid_url(value: Any) -> bool:
    """
    True only for an absolute URL with scheme exactly http or https and a
    host. `ftp://...`, `not-a-valid-url` and `http://` are all invalid.
    """
    if not isinstance(value, str):
        return False
    try:
        _http_url.validate_python(value)
    except PydanticValidationError:
        return False
    return True


def _trimmed_length(value: Any) -> int:
    return len(value.strip()) if isinstance(value, str) else 0


def _present(value: Any) -> bool:
    # Empty strings count as absent, matching how optional form fields arrive
    return value is not None and value != ""


def _out_of_range(value: Any, low: int, high: int) -> bool:
    # Whole numbers only; bool is an int subclass and does not count
    if isinstance(value, bool) or not isinstance(value, int):
        return True
    return value < low or value > high


def check_quote_fields(record: Mapping[str, Any]) -> List[str]:
    """Pure field-shape checks for a quote record."""
    errors: List[str] = []

    text = record.get("text")
    if _trimmed_length(text) < QUOTE_TEXT_MIN:
        errors.append("Quote text must be at least 10 characters long")
    if _trimmed_length(text) > QUOTE_TEXT_MAX:
        errors.append("Quote text must be less than 1000 characters")

    author = record.get("author")
    if _trimmed_length(author) < AUTHOR_MIN:
        errors.append("Author name must be at least 2 characters long")
    if _trimmed_length(author) > AUTHOR_MAX:
        errors.append("Author name must be less than 100 characters")

    category = record.get("category")
    if _present(category) and len(category) > CATEGORY_MAX:
        errors.append("Category must be less than 50 characters")

    tags = record.get("tags")
    if _present(tags) and len(tags) > TAGS_MAX:
        errors.append("Tags must be less than 200 characters")

    score = record.get("quality_score")
    if score is not None and _out_of_range(score, SCORE_MIN, SCORE_MAX):
        errors.append("Quality score must be between 1 and 10")

    status = record.get("verification_status")
    if _present(status) and status not in VERIFICATION_STATUSES:
        errors.append("Verification status must be verified, pending, or disputed")

    source_url = record.get("source_url")
    if _present(source_url) and not is_valid_url(source_url):
        errors.append("Source URL must be valid")

    return errors


async def validate_quote(
    storage: StoragePort,
    record: Mapping[str, Any],
    exclude_id: Optional[int] = None,
) -> List[str]:
    """
    Full quote validation: field checks, then the duplicate-existence read.

    Args:
        storage: Storage port used for the duplicate lookup
        record: Quote fields (text, author, category, ...)
        exclude_id: Id of the quote being replaced, so it does not count
                    as its own duplicate

    Returns:
        Ordered list of violation messages; empty when the record is valid.

    Raises:
        StorageError: The duplicate lookup failed
    """
    errors = check_quote_fields(record)

    text, author = record.get("text"), record.get("author")
    if isinstance(text, str) and isinstance(author, str):
        duplicates = await find_exact_duplicates(storage, text, author, exclude_id=exclude_id)
        if duplicates:
            logger.info(
                "Duplicate of quote %s rejected (author=%r)", duplicates[0].id, author.strip()
            )
            errors.append(DUPLICATE_MESSAGE)

    return errors


def validate_source(record: Mapping[str, Any]) -> List[str]:
    """Pure field checks for a source record."""
    errors: List[str] = []

    if _trimmed_length(record.get("title")) < SOURCE_TITLE_MIN:
        errors.append("Source title must be at least 2 characters long")

    if _trimmed_length(record.get("source_type")) < SOURCE_TYPE_MIN:
        errors.append("Source type is required")

    rating = record.get("credibility_rating")
    if rating is not None and _out_of_range(rating, SCORE_MIN, SCORE_MAX):
        errors.append("Credibility rating must be between 1 and 10")

    year = record.get("publication_year")
    current_year = datetime.now(timezone.utc).year
    if year is not None and _out_of_range(year, PUBLICATION_YEAR_MIN, current_year):
        errors.append("Publication year must be valid")

    url = record.get("url")
    if _present(url) and not is_valid_url(url):
        errors.append("URL must be valid")

    return errors
