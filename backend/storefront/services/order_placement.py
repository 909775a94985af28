"""Order Placement — builds an Order from line items, reserving stock per line.

Invariants:
    - Lines are reserved in input order; the first failure aborts the placement
    - On failure the transaction is rolled back: every prior reservation and
      every pending OrderItem row is undone, no partial order is ever visible
    - total = sum(unit_price * count) using prices captured at reservation
    - created_at comes from the injected clock and ordered_at is derived from it
      before the single INSERT of the order and its items

Design Decisions:
    - One transaction per placement; rollback is the compensation step
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.domain_types import Actor, OrderStatus, ProductId, UserRole
from storefront.core.format_dates import format_day, utc_now
from storefront.core.results import forbidden, invalid_request, is_error, ok_result
from storefront.models.order import Order
from storefront.models.order_item import OrderItem
from storefront.services.inventory_ledger import InventoryLedger, ReservedLine
from storefront.services.storage_guard import storage_guard

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderLine:
    """One (product, quantity) pair of a placement request."""
    product_id: ProductId
    count: int


def check_placement_request(
    actor: Actor, lines: Sequence[OrderLine], destination: str,
) -> dict | None:
    if actor.role != UserRole.CONSUMER:
        return forbidden("Only consumers can place orders.")
    if not lines:
        return invalid_request("An order needs at least one line item.")
    if any(line.count < 1 for line in lines):
        return invalid_request("Every line item needs a quantity of at least 1.")
    if not destination or not destination.strip():
        return invalid_request("An order needs a destination.")
    return None


class OrderPlacement:
    """Order aggregate builder."""

    def __init__(
        self, db: AsyncSession, clock: Callable[[], datetime] = utc_now,
    ):
        self.db = db
        self.clock = clock
        self.ledger = InventoryLedger(db)

    @storage_guard("order placement")
    async def place_order(
        self,
        actor: Actor,
        lines: Sequence[OrderLine],
        destination: str,
        deliver_request: str | None = None,
    ) -> dict:
        """Reserve every line and persist the order. Result carries order_id."""
        error = check_placement_request(actor, lines, destination)
        if error:
            return error

        reserved: list[ReservedLine] = []
        for line in lines:
            result = await self.ledger.reserve(line.product_id, line.count)
            if is_error(result):
                await self.db.rollback()
                logger.info(
                    f"Order placement aborted after {len(reserved)} "
                    f"reserved line(s): {result['message']}",
                    extra={
                        "actor_id": actor.id,
                        "product_id": line.product_id,
                        "error_code": result["error_code"],
                    },
                )
                return result
            reserved.append(result["line"])

        order = self._build_order(actor, reserved, destination, deliver_request)
        self.db.add(order)
        await self.db.commit()

        logger.info(
            f"Order placed with {len(reserved)} line(s), total {order.total}",
            extra={"actor_id": actor.id, "order_id": order.id},
        )
        return ok_result(
            order_id=order.id, total=order.total, ordered_at=order.ordered_at,
        )

    def _build_order(
        self,
        actor: Actor,
        reserved: list[ReservedLine],
        destination: str,
        deliver_request: str | None,
    ) -> Order:
        created_at = self.clock()
        items = [
            OrderItem(
                id=uuid.uuid4(),
                product_id=line.product_id,
                consumer_id=actor.id,
                count=line.count,
                unit_price=line.unit_price,
                status=OrderStatus.CHECKING.value,
                created_at=created_at,
            )
            for line in reserved
        ]
        return Order(
            id=uuid.uuid4(),
            consumer_id=actor.id,
            total=sum(line.line_total for line in reserved),
            destination=destination.strip(),
            deliver_request=deliver_request,
            created_at=created_at,
            ordered_at=format_day(created_at),
            items=items,
        )
