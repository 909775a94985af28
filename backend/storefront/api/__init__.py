"""API Layer — FastAPI routes and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return structured JSON responses
    - Service error results become StorefrontError exceptions here and nowhere else

Design Decisions:
    - Thin routes delegate to services
"""
