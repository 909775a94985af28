"""Order Status — cancellation and role-gated status updates for order items.

Invariants:
    - Every status write is a compare-and-set on the status observed at read time;
      losing the race returns INVALID_TRANSITION and applies no side effect
    - Stock is released only for a RELEASE_STOCK transition, at most once
    - cancel: owning consumer only, from checking only
    - update: only received/delivering/delivered targets; providers must own the product
    - Legality is decided by core/order_state_machine.py, never here
"""

import logging

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.domain_types import (
    Actor, ErrorKind, OrderItemId, OrderStatus, UserRole,
)
from storefront.core.order_state_machine import (
    TransitionEffect, check_role_reaches_target, check_transition, transition_effect,
)
from storefront.core.results import (
    error_result, forbidden, invalid_request, is_error, not_found, ok_result,
)
from storefront.models.order_item import OrderItem
from storefront.models.product import Product
from storefront.services.inventory_ledger import InventoryLedger
from storefront.services.storage_guard import storage_guard

logger = logging.getLogger(__name__)

# Targets with their own operation (cancel_order_item / refund coordinator)
_DEDICATED_TARGETS = frozenset({
    OrderStatus.CANCELED, OrderStatus.EXCHANGED, OrderStatus.REFUNDED,
})


async def compare_and_set_status(
    db: AsyncSession,
    order_item_id: OrderItemId,
    expected: OrderStatus,
    new: OrderStatus,
) -> bool:
    """Move the item to `new` only if it is still `expected`. No commit."""
    result = await db.execute(
        update(OrderItem)
        .where(
            OrderItem.id == order_item_id,
            OrderItem.status == expected.value,
        )
        .values(status=new.value)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def concurrent_change(order_item_id: OrderItemId) -> dict:
    return error_result(
        ErrorKind.INVALID_TRANSITION,
        f"Order item '{order_item_id}' was changed by another request.",
    )


class OrderStatusService:
    """State-machine driven writes to order_items.status."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.ledger = InventoryLedger(db)

    @storage_guard("order item cancellation")
    async def cancel_order_item(self, actor: Actor, order_item_id: OrderItemId) -> dict:
        """Cancel a checking item and return its stock. Result carries order_item."""
        item = await self.db.get(OrderItem, order_item_id)
        if not item:
            return not_found("OrderItem", order_item_id)
        if item.consumer_id != actor.id:
            return forbidden("Only the consumer who placed the order can cancel it.")

        current = OrderStatus(item.status)
        error = check_transition(current, OrderStatus.CANCELED, actor.role)
        if error:
            return error

        if not await compare_and_set_status(
            self.db, item.id, current, OrderStatus.CANCELED,
        ):
            await self.db.rollback()
            return concurrent_change(order_item_id)

        if transition_effect(current, OrderStatus.CANCELED) == TransitionEffect.RELEASE_STOCK:
            released = await self.ledger.release(item.product_id, item.count)
            if is_error(released):
                await self.db.rollback()
                return released

        await self.db.commit()
        await self.db.refresh(item)
        logger.info(
            f"Order item canceled, released {item.count} unit(s)",
            extra={
                "actor_id": actor.id, "order_item_id": item.id,
                "product_id": item.product_id, "quantity": item.count,
            },
        )
        return ok_result(order_item=item)

    @storage_guard("order item status update")
    async def update_order_item_status(
        self, actor: Actor, order_item_id: OrderItemId, requested: OrderStatus,
    ) -> dict:
        """Provider/admin fulfillment moves. Result carries order_item."""
        if requested in _DEDICATED_TARGETS:
            return invalid_request(
                f"Status '{requested.value}' is set through its own operation.",
            )
        error = check_role_reaches_target(requested, actor.role)
        if error:
            return error

        item = await self.db.get(OrderItem, order_item_id)
        if not item:
            return not_found("OrderItem", order_item_id)

        if actor.role == UserRole.PROVIDER:
            provider_id = await self.db.scalar(
                select(Product.provider_id).where(Product.id == item.product_id),
            )
            if provider_id != actor.id:
                return forbidden("Providers can only update items of their own products.")

        current = OrderStatus(item.status)
        error = check_transition(current, requested, actor.role)
        if error:
            return error

        if not await compare_and_set_status(self.db, item.id, current, requested):
            await self.db.rollback()
            return concurrent_change(order_item_id)
        await self.db.commit()
        await self.db.refresh(item)

        logger.info(
            "Order item status updated",
            extra={
                "actor_id": actor.id, "order_item_id": item.id,
                "status_from": current.value, "status_to": requested.value,
            },
        )
        return ok_result(order_item=item)
