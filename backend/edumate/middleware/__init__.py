"""
EduMate Backend — Middleware Package
======================================

Middleware Chain (execution order):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route

    - Rate Limit: per-IP cap on /api/ai/* before any work is done
    - Request ID: correlation id in a ContextVar and the X-Request-ID header
    - Logging:    one access-log line per request, with duration and request id
"""
