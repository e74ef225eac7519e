"""
CloudNote Backend — Application Package
=========================================

A note-taking API: users sign up, log in for a bearer token, and manage
notes that only they can see or change.

Architecture Note:
    This backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │  Auth dependency (bearer tokens)    │  ← identity for protected routes
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← credentials, ownership
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
