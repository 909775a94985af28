"""Infrastructure Layer — database plumbing and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/
    - Driver exceptions are mapped to DatabaseError before leaving this layer
"""
