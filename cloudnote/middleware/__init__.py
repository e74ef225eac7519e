# Middleware package init
"""
CloudNote Backend — Middleware Package
========================================

What:  Cross-cutting concerns applied to requests.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID first, so every later log line can carry it
    2. Logging wraps everything below it and records status and duration

Authentication is not a chain member: auth.require_identity is a FastAPI
dependency declared only by the routes that need a bearer token.
"""
