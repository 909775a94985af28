"""Refund Queries — refund history for consumers and closed items for providers.

Invariants:
    - Same ownership rules as order queries (self or admin)
    - Consumer view lists Refund rows, newest first
    - Provider view lists canceled/exchanged/refunded items of its products, oldest first
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.domain_types import CLOSED_STATUSES, Actor, UserId, UserRole
from storefront.core.results import not_found, ok_result
from storefront.models.order_item import OrderItem
from storefront.models.refund import Refund
from storefront.services.order_queries import (
    check_self_or_admin, fetch_page, provider_items_query,
)
from storefront.services.storage_guard import storage_guard
from storefront.services.users import find_user


class RefundQueries:
    def __init__(self, db: AsyncSession, page_size: int = 10):
        self.db = db
        self.page_size = page_size

    @storage_guard("consumer refund listing")
    async def list_refunds_for_consumer(
        self, actor: Actor, consumer_id: UserId, page: int = 1,
    ) -> dict:
        error = check_self_or_admin(actor, consumer_id, "refunds")
        if error:
            return error
        if not await find_user(self.db, consumer_id, UserRole.CONSUMER):
            return not_found("Consumer", consumer_id)

        data = await fetch_page(
            self.db,
            select(Refund).where(Refund.refundee_id == consumer_id),
            (Refund.created_at.desc(), Refund.id),
            max(page, 1), self.page_size,
        )
        return ok_result(refunds=data.pop("rows"), **data)

    @storage_guard("provider refund listing")
    async def list_refunds_for_provider(
        self, actor: Actor, provider_id: UserId, page: int = 1,
    ) -> dict:
        error = check_self_or_admin(actor, provider_id, "refunded order items")
        if error:
            return error
        if not await find_user(self.db, provider_id, UserRole.PROVIDER):
            return not_found("Provider", provider_id)

        data = await fetch_page(
            self.db,
            provider_items_query(provider_id, CLOSED_STATUSES),
            (OrderItem.created_at.asc(), OrderItem.id),
            max(page, 1), self.page_size,
        )
        return ok_result(order_items=data.pop("rows"), **data)
