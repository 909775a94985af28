"""Order Queries — consumer and provider read paths over orders and order items.

Invariants:
    - Ownership is checked before any row is read:
      consumer listings -> that consumer or admin; provider listings -> that provider or admin
    - Unknown consumer/provider -> NOT_FOUND
    - Consumer orders newest first; provider items oldest first
    - List results carry total_count plus the PageInfo keys (core/pagination.py)
    - page < 1 is clamped to 1
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.domain_types import (
    ACTIVE_STATUSES, Actor, OrderId, OrderItemId, UserId, UserRole,
)
from storefront.core.pagination import page_offset, paginate
from storefront.core.results import forbidden, not_found, ok_result
from storefront.models.order import Order
from storefront.models.order_item import OrderItem
from storefront.models.product import Product
from storefront.services.storage_guard import storage_guard
from storefront.services.users import find_user


def check_self_or_admin(actor: Actor, owner_id: UserId, what: str) -> dict | None:
    if actor.id != owner_id and not actor.is_admin:
        return forbidden(f"You can only view your own {what}.")
    return None


def provider_items_query(provider_id: UserId, statuses):
    """Order items of the provider's products in the given statuses."""
    return (
        select(OrderItem)
        .join(Product, OrderItem.product_id == Product.id)
        .where(
            Product.provider_id == provider_id,
            OrderItem.status.in_([s.value for s in statuses]),
        )
    )


async def fetch_page(db: AsyncSession, query, order_by, page: int, page_size: int) -> dict:
    """Count + slice a query, returning rows and pagination keys."""
    total = await db.scalar(
        select(func.count()).select_from(query.order_by(None).subquery()),
    )
    result = await db.execute(
        query.order_by(*order_by)
        .offset(page_offset(page, page_size))
        .limit(page_size),
    )
    rows = list(result.scalars().all())
    return {
        "rows": rows,
        "total_count": total,
        **paginate(page, page_size, total).to_dict(),
    }


class OrderQueries:
    """Read paths for orders."""

    def __init__(self, db: AsyncSession, page_size: int = 10):
        self.db = db
        self.page_size = page_size

    @storage_guard("consumer order listing")
    async def list_orders_for_consumer(
        self, actor: Actor, consumer_id: UserId, page: int = 1,
    ) -> dict:
        error = check_self_or_admin(actor, consumer_id, "orders")
        if error:
            return error
        if not await find_user(self.db, consumer_id, UserRole.CONSUMER):
            return not_found("Consumer", consumer_id)

        data = await fetch_page(
            self.db,
            select(Order).where(Order.consumer_id == consumer_id),
            (Order.created_at.desc(), Order.id),
            max(page, 1), self.page_size,
        )
        return ok_result(orders=data.pop("rows"), **data)

    @storage_guard("order lookup")
    async def find_order_by_id(self, actor: Actor, order_id: OrderId) -> dict:
        order = await self.db.get(Order, order_id)
        if not order:
            return not_found("Order", order_id)
        error = check_self_or_admin(actor, order.consumer_id, "orders")
        if error:
            return error
        return ok_result(order=order)

    @storage_guard("provider order item listing")
    async def list_order_items_for_provider(
        self, actor: Actor, provider_id: UserId, page: int = 1,
    ) -> dict:
        error = check_self_or_admin(actor, provider_id, "sold order items")
        if error:
            return error
        if not await find_user(self.db, provider_id, UserRole.PROVIDER):
            return not_found("Provider", provider_id)

        data = await fetch_page(
            self.db,
            provider_items_query(provider_id, ACTIVE_STATUSES),
            (OrderItem.created_at.asc(), OrderItem.id),
            max(page, 1), self.page_size,
        )
        return ok_result(order_items=data.pop("rows"), **data)

    @storage_guard("order item lookup")
    async def find_order_item_by_id(self, actor: Actor, order_item_id: OrderItemId) -> dict:
        """Visible to the item's consumer, the product's provider, and admins."""
        item = await self.db.get(OrderItem, order_item_id)
        if not item:
            return not_found("OrderItem", order_item_id)
        if not actor.is_admin and actor.id != item.consumer_id:
            provider_id = await self.db.scalar(
                select(Product.provider_id).where(Product.id == item.product_id),
            )
            if actor.id != provider_id:
                return forbidden("You cannot view this order item.")
        return ok_result(order_item=item)
