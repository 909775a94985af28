"""Domain types tests."""

from uuid import uuid4

from storefront.core.domain_types import (
    ACTIVE_STATUSES, CLOSED_STATUSES, Actor, OrderStatus, RefundStatus, UserRole,
)


def test_refund_status_maps_to_order_status():
    assert RefundStatus.EXCHANGED.order_status == OrderStatus.EXCHANGED
    assert RefundStatus.REFUNDED.order_status == OrderStatus.REFUNDED


def test_active_and_closed_partition_all_statuses():
    assert ACTIVE_STATUSES | CLOSED_STATUSES == set(OrderStatus)
    assert not ACTIVE_STATUSES & CLOSED_STATUSES


def test_actor_from_record():
    class _Row:
        id = uuid4()
        role = "admin"

    actor = Actor.from_record(_Row)
    assert actor.role == UserRole.ADMIN
    assert actor.is_admin
