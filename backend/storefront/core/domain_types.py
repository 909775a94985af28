"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, ProductId, OrderId, OrderItemId wrap UUIDs
    - All valid states encoded as str Enums, no raw string matching
    - Actor is the only representation of "who is asking" inside services

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: values are stored as-is in String columns and serialize to JSON
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
ProductId = NewType("ProductId", UUID)
OrderId = NewType("OrderId", UUID)
OrderItemId = NewType("OrderItemId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class UserRole(str, Enum):
    """Actor roles (users.role column)."""
    CONSUMER = "consumer"
    PROVIDER = "provider"
    ADMIN = "admin"


class OrderStatus(str, Enum):
    """Order item lifecycle (order_items.status column)."""
    CHECKING = "checking"
    RECEIVED = "received"
    DELIVERING = "delivering"
    DELIVERED = "delivered"
    CANCELED = "canceled"
    EXCHANGED = "exchanged"
    REFUNDED = "refunded"


class RefundStatus(str, Enum):
    """Requested outcome of a refund record; always a terminal OrderStatus."""
    EXCHANGED = "exchanged"
    REFUNDED = "refunded"

    @property
    def order_status(self) -> OrderStatus:
        return OrderStatus(self.value)


class ProductSort(str, Enum):
    """Orderings offered by product listings."""
    CREATED_AT_DESC = "created_at_desc"
    PRICE_DESC = "price_desc"
    PRICE_ASC = "price_asc"


class ErrorKind(str, Enum):
    """Error codes carried by every failed service result."""
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    INVALID_REQUEST = "INVALID_REQUEST"
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    ALREADY_FINALIZED = "ALREADY_FINALIZED"
    STORAGE_ERROR = "STORAGE_ERROR"


TERMINAL_STATUSES = frozenset({
    OrderStatus.CANCELED, OrderStatus.EXCHANGED, OrderStatus.REFUNDED,
})

# Provider dashboards split items by these two sets
ACTIVE_STATUSES = frozenset({
    OrderStatus.CHECKING, OrderStatus.RECEIVED,
    OrderStatus.DELIVERING, OrderStatus.DELIVERED,
})
CLOSED_STATUSES = TERMINAL_STATUSES


# ─── Actor ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class Actor:
    """Authenticated caller, resolved by the API layer."""
    id: UserId
    role: UserRole

    @classmethod
    def from_record(cls, user) -> "Actor":
        """Build from any record exposing id and role (e.g. the User row)."""
        return cls(id=user.id, role=UserRole(user.role))

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
