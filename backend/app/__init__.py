"""
Tourlist Backend - Application Package
=======================================

Layered layout:

    ┌─────────────────────────────────────┐
    │   Routes + Middleware (HTTP layer)  │  ← status codes, gating, request IDs
    ├─────────────────────────────────────┤
    │   Auth (session resolver, gate)     │  ← who is calling, may they do this
    ├─────────────────────────────────────┤
    │   Services (business logic)         │  ← validators, uniqueness, uploads
    ├─────────────────────────────────────┤
    │   Models & Schemas (data)           │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │   Database (persistence)            │  ← async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
