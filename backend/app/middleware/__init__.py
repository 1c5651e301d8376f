"""
Tourlist Backend - Middleware Package
======================================

Middleware Chain (order matters):
    Request → [Request ID] → [Logging] → [Session gate] → [GZip] → [CORS] → Route

    1. Request ID first so every response, including gate denials, carries it
    2. Logging sees the final status of every request
    3. Session gate rejects /checkout and /admin requests before routing
"""
