"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)
    - Domain types from core/ used for enum fields
    - Response models read ORM objects via from_attributes

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
