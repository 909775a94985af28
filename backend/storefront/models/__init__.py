"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Order is the aggregate root for OrderItems; Refund hangs off one OrderItem

Design Decisions:
    - One file per entity for locality
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from storefront.models.user import User  # noqa: F401
from storefront.models.product import Product  # noqa: F401
from storefront.models.order import Order  # noqa: F401
from storefront.models.order_item import OrderItem  # noqa: F401
from storefront.models.refund import Refund  # noqa: F401
