"""
StageLink Backend — Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters):
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route

    1. Rate Limit first: reject floods before a session is opened
    2. Request ID: correlation id for every log line of the request
    3. Logging: method/path/status/duration with that id

Rejections raised here never reach the app's exception handlers (they sit
inside the middleware stack), so each middleware renders its own error body
in the same {error, message, details, request_id} shape.
"""
