"""Services Layer — imperative shell around the pure core.

Invariants:
    - Every public service method returns a result dict (core/results.py)
    - Services receive their AsyncSession (and clock / page size) through the constructor
    - Stock changes go through InventoryLedger only

Design Decisions:
    - One class per workflow (placement, status changes, refunds, queries)
      so no class owns more than a handful of operations
"""
