# Middleware package init
"""
Quotebook Backend: Middleware Package
======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: correlation ID for logs and error bodies
    2. Logging: one access line per request, tagged with that ID
    3. GZip / CORS: FastAPI's stock middleware

    Responses travel the chain in reverse, so the request ID header is
    set on every response and the access log sees the final status.
"""
