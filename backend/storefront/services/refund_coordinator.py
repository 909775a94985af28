"""Refund Coordinator — validates refund/exchange requests and records them.

Invariants:
    - Check order: consumer role -> field shape -> item exists -> item owner
      -> not already exchanged/refunded -> state machine
    - Refund row and the item's terminal status are written in one transaction
    - refunded_at derived from the clock before the INSERT
    - No stock adjustment: only cancellation releases stock
    - refunds.order_item_id is unique; a losing concurrent request gets ALREADY_FINALIZED
"""

import logging
from datetime import datetime
from typing import Callable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.domain_types import (
    Actor, ErrorKind, OrderItemId, OrderStatus, RefundStatus,
)
from storefront.core.format_dates import format_day, utc_now
from storefront.core.order_state_machine import check_transition
from storefront.core.refund_rules import (
    RefundFields, check_not_finalized, validate_refund_request,
)
from storefront.core.results import error_result, forbidden, not_found, ok_result
from storefront.models.order_item import OrderItem
from storefront.models.refund import Refund
from storefront.services.order_status import compare_and_set_status, concurrent_change
from storefront.services.storage_guard import storage_guard

logger = logging.getLogger(__name__)


class RefundCoordinator:
    """Refund/exchange request workflow."""

    def __init__(
        self, db: AsyncSession, clock: Callable[[], datetime] = utc_now,
    ):
        self.db = db
        self.clock = clock

    @storage_guard("refund request")
    async def request_refund_or_exchange(
        self,
        actor: Actor,
        order_item_id: OrderItemId,
        status: RefundStatus,
        fields: RefundFields,
    ) -> dict:
        """Record the refund and finalize the item. Result carries order_item and refund."""
        error = validate_refund_request(actor.role, status, fields)
        if error:
            return error

        item = await self.db.get(OrderItem, order_item_id)
        if not item:
            return not_found("OrderItem", order_item_id)
        if item.consumer_id != actor.id:
            return forbidden("Only the consumer who placed the order can request a refund.")

        current = OrderStatus(item.status)
        target = status.order_status
        error = (
            check_not_finalized(current)
            or check_transition(current, target, actor.role)
        )
        if error:
            return error

        refund = self._build_refund(actor, item, status, fields)
        try:
            self.db.add(refund)
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            return error_result(
                ErrorKind.ALREADY_FINALIZED,
                f"A refund already exists for order item '{order_item_id}'.",
            )

        if not await compare_and_set_status(self.db, item.id, current, target):
            await self.db.rollback()
            return concurrent_change(order_item_id)

        await self.db.commit()
        await self.db.refresh(item)
        logger.info(
            f"Order item {target.value}",
            extra={
                "actor_id": actor.id, "order_item_id": item.id,
                "refund_id": refund.id, "status_from": current.value,
                "status_to": target.value,
            },
        )
        return ok_result(order_item=item, refund=refund)

    def _build_refund(
        self,
        actor: Actor,
        item: OrderItem,
        status: RefundStatus,
        fields: RefundFields,
    ) -> Refund:
        created_at = self.clock()
        return Refund(
            order_item_id=item.id,
            refundee_id=actor.id,
            status=status.value,
            problem_title=fields.problem_title,
            problem_description=fields.problem_description,
            send_day=fields.send_day,
            send_place=fields.send_place,
            refund_pay=fields.refund_pay,
            created_at=created_at,
            refunded_at=format_day(created_at),
        )
