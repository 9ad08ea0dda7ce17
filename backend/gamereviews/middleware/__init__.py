# Middleware package init
"""
Game Reviews API — Middleware Package
=======================================

Middleware Chain (order matters):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route

    1. Rate Limit first: reject abusive clients before any other work
    2. Request ID: correlation id for logs and the X-Request-ID header
    3. Logging: one access line per request, tagged with the request id
"""
