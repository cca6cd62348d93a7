"""
Plant API — Middleware Package
===============================

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [Rate Limit] → [GZip] → [CORS] → Route

    1. Request ID:  correlation id on every response, 429s included
    2. Logging:     one access line per request, unhandled errors included
    3. Rate Limit:  only the credential endpoints; rejects before any work

The bearer-token gate is not middleware: it is the `require_user`
dependency in auth.py, attached per route or per router.
"""
