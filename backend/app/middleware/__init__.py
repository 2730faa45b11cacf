"""
Folio Backend — Middleware Package
====================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Rate Limit first: rejected requests cost nothing downstream
    2. Request ID: correlation ID for every log line of the request
    3. Logging: method, path, status, and duration with the request ID

    Responses travel back through the same chain in reverse, which is where
    X-Request-ID is attached and the duration is measured.
"""
