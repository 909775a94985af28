"""Refund coordinator tests — refund/exchange requests on order items.

Tests cover:
    - Refund and exchange finalize the item and record a refund row
    - Field shape mismatches -> INVALID_REQUEST with no state change
    - A second request -> ALREADY_FINALIZED
    - Canceled items -> INVALID_TRANSITION
    - Role and ownership checks
    - Stock is untouched by refunds
    - A lost compare-and-set leaves no refund row behind
"""

import uuid
from datetime import date

import pytest
from sqlalchemy import func, select

from storefront.core.domain_types import Actor, OrderStatus, RefundStatus
from storefront.core.refund_rules import RefundFields
from storefront.models.refund import Refund
from storefront.services.order_status import OrderStatusService
from storefront.services import refund_coordinator
from storefront.services.refund_coordinator import RefundCoordinator

PAYOUT = RefundFields(
    problem_title="Arrived broken", problem_description="Cracked lid", refund_pay=100,
)
PICKUP = RefundFields(
    problem_title="Wrong colour", send_day=date(2026, 3, 10), send_place="Front desk",
)


@pytest.fixture
def coordinator(test_db, clock):
    return RefundCoordinator(test_db, clock=clock)


async def test_refund_finalizes_item(
    coordinator, consumer, product_a, placed_item, read_stock,
):
    item = await placed_item(consumer, product_a, 2)

    result = await coordinator.request_refund_or_exchange(
        Actor.from_record(consumer), item.id, RefundStatus.REFUNDED, PAYOUT,
    )

    assert result["status"] == "ok"
    assert result["order_item"].status == "refunded"
    refund = result["refund"]
    assert refund.status == "refunded"
    assert refund.refund_pay == 100
    assert refund.refundee_id == consumer.id
    assert refund.refunded_at == "2026-03-05 14:07"
    assert await read_stock(product_a.id) == 3


async def test_exchange_records_pickup(coordinator, consumer, product_a, placed_item):
    item = await placed_item(consumer, product_a, 1)

    result = await coordinator.request_refund_or_exchange(
        Actor.from_record(consumer), item.id, RefundStatus.EXCHANGED, PICKUP,
    )

    assert result["order_item"].status == "exchanged"
    assert result["refund"].send_place == "Front desk"
    assert result["refund"].send_day == date(2026, 3, 10)
    assert result["refund"].refund_pay is None


async def test_exchange_with_refund_pay_is_invalid(
    coordinator, consumer, product_a, placed_item, read_items,
):
    item = await placed_item(consumer, product_a, 1)
    fields = RefundFields(
        send_day=date(2026, 3, 10), send_place="Front desk", refund_pay=100,
    )

    result = await coordinator.request_refund_or_exchange(
        Actor.from_record(consumer), item.id, RefundStatus.EXCHANGED, fields,
    )

    assert result["error_code"] == "INVALID_REQUEST"
    [stored] = await read_items()
    assert stored.status == "checking"


async def test_second_request_is_already_finalized(
    coordinator, consumer, product_a, placed_item,
):
    item = await placed_item(consumer, product_a, 1)
    actor = Actor.from_record(consumer)
    await coordinator.request_refund_or_exchange(
        actor, item.id, RefundStatus.REFUNDED, PAYOUT,
    )

    result = await coordinator.request_refund_or_exchange(
        actor, item.id, RefundStatus.EXCHANGED, PICKUP,
    )
    assert result["error_code"] == "ALREADY_FINALIZED"


async def test_canceled_item_cannot_be_refunded(
    test_db, coordinator, consumer, product_a, placed_item,
):
    item = await placed_item(consumer, product_a, 1)
    actor = Actor.from_record(consumer)
    await OrderStatusService(test_db).cancel_order_item(actor, item.id)

    result = await coordinator.request_refund_or_exchange(
        actor, item.id, RefundStatus.REFUNDED, PAYOUT,
    )
    assert result["error_code"] == "INVALID_TRANSITION"


async def test_delivered_item_can_be_refunded(
    test_db, coordinator, consumer, provider, admin, product_a, placed_item,
):
    item = await placed_item(consumer, product_a, 1)
    status = OrderStatusService(test_db)
    await status.update_order_item_status(
        Actor.from_record(provider), item.id, OrderStatus.RECEIVED,
    )
    await status.update_order_item_status(
        Actor.from_record(admin), item.id, OrderStatus.DELIVERED,
    )

    result = await coordinator.request_refund_or_exchange(
        Actor.from_record(consumer), item.id, RefundStatus.REFUNDED, PAYOUT,
    )
    assert result["order_item"].status == "refunded"


async def test_provider_cannot_request(coordinator, consumer, provider, product_a, placed_item):
    item = await placed_item(consumer, product_a, 1)
    result = await coordinator.request_refund_or_exchange(
        Actor.from_record(provider), item.id, RefundStatus.REFUNDED, PAYOUT,
    )
    assert result["error_code"] == "FORBIDDEN"


async def test_other_consumer_cannot_request(
    coordinator, consumer, other_consumer, product_a, placed_item,
):
    item = await placed_item(consumer, product_a, 1)
    result = await coordinator.request_refund_or_exchange(
        Actor.from_record(other_consumer), item.id, RefundStatus.REFUNDED, PAYOUT,
    )
    assert result["error_code"] == "FORBIDDEN"


async def test_unknown_item(coordinator, consumer):
    result = await coordinator.request_refund_or_exchange(
        Actor.from_record(consumer), uuid.uuid4(), RefundStatus.REFUNDED, PAYOUT,
    )
    assert result["error_code"] == "NOT_FOUND"


async def test_losing_race_is_invalid_transition_without_refund(
    monkeypatch, test_db, coordinator, consumer, product_a, placed_item, read_items,
):
    async def _lose_race(*args, **kwargs):
        return False

    item = await placed_item(consumer, product_a, 1)
    monkeypatch.setattr(refund_coordinator, "compare_and_set_status", _lose_race)

    result = await coordinator.request_refund_or_exchange(
        Actor.from_record(consumer), item.id, RefundStatus.REFUNDED, PAYOUT,
    )

    assert result["error_code"] == "INVALID_TRANSITION"
    assert await test_db.scalar(select(func.count()).select_from(Refund)) == 0
    [stored] = await read_items()
    assert stored.status == "checking"
