# Routes package init
"""
Quotebook Backend: API Routes Package
======================================

Route Inventory:
    - quotes.py:  /api/quotes[...]   catalog CRUD, random/daily, search,
                                     suggestions, similarity, stats
    - sources.py: /api/sources[...]  provenance CRUD and lookups
    - health.py:  GET /health        service health check
    - deps.py:    request-scoped storage port dependency

Routes are thin: they extract parameters, call a service with a storage
port, and map None to 404. Business rules live in services.
"""
