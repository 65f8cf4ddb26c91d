# Middleware package init
"""
Contacts API — Middleware Package
==================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request Logging] → Route Handler

    JSON body parsing is FastAPI's own; the request logger is the only
    custom middleware. It sets X-Request-ID on the way in and logs status
    and duration on the way out.
"""
