# Services package init
"""
Quotebook Backend: Services Layer
==================================

Service Inventory:
    - storage:        StoragePort contract + SQLAlchemyStorage implementation
    - validation:     Field rules and the duplicate-existence check
    - similarity:     Normalized Levenshtein similarity
    - duplicates:     Exact and near-duplicate detection
    - quote_service:  Quote CRUD, random selection, filters, search, stats
    - daily_quote:    Quote-of-the-day selection (UTC day boundary)
    - source_service: Source CRUD and lookups
    - seed:           Sample catalog for empty databases

Every service receives the storage port as an argument; none of them
holds a database handle of its own.
"""
