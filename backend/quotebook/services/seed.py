"""
Quotebook Backend: Sample Catalog Seeding
==========================================

What:  A starter set of sources and quotes, loaded into an empty catalog.
When:  Application startup when SEED_ON_STARTUP=true.
How:   Goes through SourceService/QuoteService so every record passes the
       same validation as API writes. Nothing is inserted when the quotes
       table already has rows.
"""

import logging

from quotebook.exceptions import ValidationError
from quotebook.schemas.quote import QuoteCreate
from quotebook.schemas.source import SourceCreate
from quotebook.services.quote_service import quote_service
from quotebook.services.source_service import source_service
from quotebook.services.storage import StoragePort

logger = logging.getLogger(__name__)

SAMPLE_SOURCES = [
    {
        "title": "First Inaugural Address",
        "author": "Franklin D. Roosevelt",
        "publication_year": 1933,
        "source_type": "speech",
        "credibility_rating": 10,
        "description": "Presidential inaugural address during the Great Depression",
    },
    {
        "title": "Stanford Commencement Address",
        "author": "Steve Jobs",
        "publication_year": 2005,
        "source_type": "speech",
        "credibility_rating": 9,
        "description": "Commencement speech at Stanford University",
    },
    {
        "title": "Self-Reliance",
        "author": "Ralph Waldo Emerson",
        "publication_year": 1841,
        "source_type": "essay",
        "credibility_rating": 9,
        "description": "Transcendentalist essay on individualism",
    },
    {
        "title": "Long Walk to Freedom",
        "author": "Nelson Mandela",
        "publication_year": 1994,
        "source_type": "book",
        "credibility_rating": 9,
        "description": "Autobiography",
    },
]

SAMPLE_QUOTES = [
    {
        "text": "The only thing we have to fear is fear itself.",
        "author": "Franklin D. Roosevelt",
        "category": "Courage",
        "tags": "fear,courage,resolve",
        "source_title": "First Inaugural Address",
        "source_type": "speech",
        "verification_status": "verified",
        "quality_score": 10,
    },
    {
        "text": "Your time is limited, so don't waste it living someone else's life.",
        "author": "Steve Jobs",
        "category": "Authenticity",
        "tags": "time,authenticity,individuality",
        "source_title": "Stanford Commencement Address",
        "source_type": "speech",
        "verification_status": "verified",
        "quality_score": 9,
    },
    {
        "text": "Trust thyself: every heart vibrates to that iron string.",
        "author": "Ralph Waldo Emerson",
        "category": "Self-Development",
        "tags": "trust,self-reliance,confidence",
        "source_title": "Self-Reliance",
        "source_type": "essay",
        "verification_status": "verified",
        "quality_score": 8,
    },
    {
        "text": "The greatest glory in living lies not in never falling, but in rising every time we fall.",
        "author": "Nelson Mandela",
        "category": "Resilience",
        "tags": "resilience,failure,recovery",
        "verification_status": "disputed",
        "quality_score": 7,
    },
    {
        "text": "Success is not final, failure is not fatal: it is the courage to continue that counts.",
        "author": "Winston Churchill",
        "category": "Success",
        "tags": "success,failure,courage,persistence",
        "verification_status": "disputed",
        "quality_score": 6,
    },
    {
        "text": "In the middle of difficulty lies opportunity.",
        "author": "Albert Einstein",
        "category": "Opportunity",
        "tags": "difficulty,opportunity,perspective",
    },
    {
        "text": "Believe you can and you're halfway there.",
        "author": "Theodore Roosevelt",
        "category": "Belief",
        "tags": "belief,confidence,achievement",
    },
    {
        "text": "Don't watch the clock; do what it does. Keep going.",
        "author": "Sam Levenson",
        "category": "Persistence",
        "tags": "persistence,time,action",
    },
    {
        "text": "Whether you think you can or you think you can't, you're right.",
        "author": "Henry Ford",
        "category": "Mindset",
        "tags": "mindset,belief,attitude",
    },
    {
        "text": "The way to get started is to quit talking and begin doing.",
        "author": "Walt Disney",
        "category": "Action",
        "tags": "action,start,execution",
    },
    {
        "text": "The best time to plant a tree was 20 years ago. The second best time is now.",
        "author": "Chinese Proverb",
        "category": "Action",
        "tags": "action,timing,opportunity",
        "source_type": "proverb",
    },
    {
        "text": "Don't be afraid to give up the good to go for the great.",
        "author": "John D. Rockefeller",
        "category": "Excellence",
        "tags": "excellence,sacrifice,greatness",
    },
]


async def seed_database(storage: StoragePort) -> int:
    """
    Load the sample catalog into an empty database.

    Returns:
        Number of quotes inserted (0 when the catalog already had quotes).
    """
    existing = await quote_service.count_quotes(storage)
    if existing > 0:
        logger.info("Catalog already contains %d quotes; skipping seed", existing)
        return 0

    for data in SAMPLE_SOURCES:
        await source_service.create_source(storage, SourceCreate(**data))

    inserted = 0
    for data in SAMPLE_QUOTES:
        try:
            await quote_service.create_quote(storage, QuoteCreate(**data))
        except ValidationError as e:
            logger.warning("Skipping sample quote by %s: %s", data["author"], e.violations)
            continue
        inserted += 1

    logger.info("Seeded %d sources and %d quotes", len(SAMPLE_SOURCES), inserted)
    return inserted
