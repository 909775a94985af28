"""Order status tests — cancellation and role-gated fulfillment moves.

Tests cover:
    - Cancel restores stock exactly once
    - Re-cancel and cancel after receipt are INVALID_TRANSITION
    - Ownership: only the placing consumer cancels, only the owning provider receives
    - Provider cannot set delivering; admin moves received items along
    - Dedicated targets are refused by the generic update
    - compare-and-set loses against a stale expected status
    - A lost compare-and-set reports INVALID_TRANSITION and releases nothing
"""

import uuid

from storefront.core.domain_types import Actor, OrderStatus
from storefront.services import order_status
from storefront.services.order_status import OrderStatusService, compare_and_set_status


async def test_cancel_restores_stock(test_db, consumer, product_a, placed_item, read_stock):
    item = await placed_item(consumer, product_a, 2)
    assert await read_stock(product_a.id) == 3

    result = await OrderStatusService(test_db).cancel_order_item(
        Actor.from_record(consumer), item.id,
    )

    assert result["status"] == "ok"
    assert result["order_item"].status == "canceled"
    assert await read_stock(product_a.id) == 5


async def test_recancel_is_invalid_and_keeps_stock(
    test_db, consumer, product_a, placed_item, read_stock,
):
    item = await placed_item(consumer, product_a, 2)
    service = OrderStatusService(test_db)
    actor = Actor.from_record(consumer)

    await service.cancel_order_item(actor, item.id)
    result = await service.cancel_order_item(actor, item.id)

    assert result["error_code"] == "INVALID_TRANSITION"
    assert await read_stock(product_a.id) == 5


async def test_other_consumer_cannot_cancel(
    test_db, consumer, other_consumer, product_a, placed_item, read_stock,
):
    item = await placed_item(consumer, product_a, 1)
    result = await OrderStatusService(test_db).cancel_order_item(
        Actor.from_record(other_consumer), item.id,
    )
    assert result["error_code"] == "FORBIDDEN"
    assert await read_stock(product_a.id) == 4


async def test_cancel_unknown_item(test_db, consumer):
    result = await OrderStatusService(test_db).cancel_order_item(
        Actor.from_record(consumer), uuid.uuid4(),
    )
    assert result["error_code"] == "NOT_FOUND"


async def test_cancel_after_receipt_is_invalid(
    test_db, consumer, provider, product_a, placed_item, read_stock,
):
    item = await placed_item(consumer, product_a, 1)
    service = OrderStatusService(test_db)
    await service.update_order_item_status(
        Actor.from_record(provider), item.id, OrderStatus.RECEIVED,
    )

    result = await service.cancel_order_item(Actor.from_record(consumer), item.id)

    assert result["error_code"] == "INVALID_TRANSITION"
    assert await read_stock(product_a.id) == 4


async def test_provider_confirms_receipt(test_db, consumer, provider, product_a, placed_item):
    item = await placed_item(consumer, product_a, 1)
    result = await OrderStatusService(test_db).update_order_item_status(
        Actor.from_record(provider), item.id, OrderStatus.RECEIVED,
    )
    assert result["status"] == "ok"
    assert result["order_item"].status == "received"


async def test_other_provider_cannot_confirm(
    test_db, consumer, other_provider, product_a, placed_item,
):
    item = await placed_item(consumer, product_a, 1)
    result = await OrderStatusService(test_db).update_order_item_status(
        Actor.from_record(other_provider), item.id, OrderStatus.RECEIVED,
    )
    assert result["error_code"] == "FORBIDDEN"


async def test_provider_cannot_set_delivering(
    test_db, consumer, provider, product_a, placed_item,
):
    item = await placed_item(consumer, product_a, 1)
    service = OrderStatusService(test_db)
    await service.update_order_item_status(
        Actor.from_record(provider), item.id, OrderStatus.RECEIVED,
    )

    result = await service.update_order_item_status(
        Actor.from_record(provider), item.id, OrderStatus.DELIVERING,
    )
    assert result["error_code"] == "FORBIDDEN"


async def test_admin_moves_received_item_to_delivered(
    test_db, consumer, provider, admin, product_a, placed_item,
):
    item = await placed_item(consumer, product_a, 1)
    service = OrderStatusService(test_db)
    await service.update_order_item_status(
        Actor.from_record(provider), item.id, OrderStatus.RECEIVED,
    )

    delivering = await service.update_order_item_status(
        Actor.from_record(admin), item.id, OrderStatus.DELIVERING,
    )
    delivered = await service.update_order_item_status(
        Actor.from_record(admin), item.id, OrderStatus.DELIVERED,
    )

    assert delivering["status"] == "ok"
    assert delivered["order_item"].status == "delivered"


async def test_admin_cannot_skip_receipt(test_db, consumer, admin, product_a, placed_item):
    item = await placed_item(consumer, product_a, 1)
    result = await OrderStatusService(test_db).update_order_item_status(
        Actor.from_record(admin), item.id, OrderStatus.DELIVERING,
    )
    assert result["error_code"] == "INVALID_TRANSITION"


async def test_generic_update_refuses_dedicated_targets(
    test_db, consumer, product_a, placed_item,
):
    item = await placed_item(consumer, product_a, 1)
    result = await OrderStatusService(test_db).update_order_item_status(
        Actor.from_record(consumer), item.id, OrderStatus.CANCELED,
    )
    assert result["error_code"] == "INVALID_REQUEST"


async def test_consumer_cannot_use_generic_update(
    test_db, consumer, product_a, placed_item,
):
    item = await placed_item(consumer, product_a, 1)
    result = await OrderStatusService(test_db).update_order_item_status(
        Actor.from_record(consumer), item.id, OrderStatus.RECEIVED,
    )
    assert result["error_code"] == "FORBIDDEN"


async def test_compare_and_set_rejects_stale_status(
    test_db, consumer, product_a, placed_item, read_items,
):
    item = await placed_item(consumer, product_a, 1)

    moved = await compare_and_set_status(
        test_db, item.id, OrderStatus.RECEIVED, OrderStatus.DELIVERING,
    )
    await test_db.commit()

    assert moved is False
    [stored] = await read_items()
    assert stored.status == "checking"


# ─── Lost compare-and-set ────────────────────────────────────────

async def _lose_race(*args, **kwargs):
    return False


async def test_cancel_losing_race_is_invalid_transition(
    monkeypatch, test_db, consumer, product_a, placed_item, read_stock, read_items,
):
    item = await placed_item(consumer, product_a, 1)
    monkeypatch.setattr(order_status, "compare_and_set_status", _lose_race)

    result = await OrderStatusService(test_db).cancel_order_item(
        Actor.from_record(consumer), item.id,
    )

    assert result["error_code"] == "INVALID_TRANSITION"
    assert str(item.id) in result["message"]
    assert await read_stock(product_a.id) == 4
    [stored] = await read_items()
    assert stored.status == "checking"


async def test_update_losing_race_is_invalid_transition(
    monkeypatch, test_db, consumer, provider, product_a, placed_item,
):
    item = await placed_item(consumer, product_a, 1)
    monkeypatch.setattr(order_status, "compare_and_set_status", _lose_race)

    result = await OrderStatusService(test_db).update_order_item_status(
        Actor.from_record(provider), item.id, OrderStatus.RECEIVED,
    )

    assert result["error_code"] == "INVALID_TRANSITION"
