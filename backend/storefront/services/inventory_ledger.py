"""Inventory Ledger — atomic stock reservation and release.

Invariants:
    - stock never goes below 0: reserve is a single conditional UPDATE
      (`SET stock = stock - q WHERE id = ? AND stock >= q`), so two concurrent
      reservations can never both pass against the same pre-decrement stock
    - The ledger never commits: the caller owns the transaction boundary
    - unit price is captured in the same transaction as the decrement

Design Decisions:
    - Conditional UPDATE instead of SELECT ... FOR UPDATE + write: the row lock
      is held only for the one statement, and SQLite runs it unchanged
    - release() is not idempotent; the order-item compare-and-set guarantees
      it runs at most once per cancellation
"""

import logging
from dataclasses import dataclass

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.domain_types import ErrorKind, ProductId
from storefront.core.results import (
    error_result, invalid_request, not_found, ok_result,
)
from storefront.models.product import Product

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReservedLine:
    """A committed-to-order line: stock already decremented."""
    product_id: ProductId
    count: int
    unit_price: int

    @property
    def line_total(self) -> int:
        return self.unit_price * self.count


class InventoryLedger:
    """Owns every write to products.stock."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def reserve(self, product_id: ProductId, quantity: int) -> dict:
        """Decrement stock by quantity. Result carries `line` (ReservedLine)."""
        if quantity < 1:
            return invalid_request("Quantity must be at least 1.")

        result = await self.db.execute(
            update(Product)
            .where(Product.id == product_id, Product.stock >= quantity)
            .values(stock=Product.stock - quantity)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            stock = await self.db.scalar(
                select(Product.stock).where(Product.id == product_id),
            )
            if stock is None:
                return not_found("Product", product_id)
            logger.info(
                "Reservation rejected: insufficient stock",
                extra={"product_id": product_id, "quantity": quantity},
            )
            return error_result(
                ErrorKind.INSUFFICIENT_STOCK,
                f"Requested {quantity} of product '{product_id}' "
                f"but only {stock} in stock.",
            )

        price = await self.db.scalar(
            select(Product.price).where(Product.id == product_id),
        )
        return ok_result(line=ReservedLine(product_id, quantity, price))

    async def release(self, product_id: ProductId, quantity: int) -> dict:
        """Return quantity to stock (cancellation)."""
        return await self._increment(product_id, quantity)

    async def restock(self, product_id: ProductId, quantity: int) -> dict:
        """Add newly delivered units to stock (provider restock)."""
        return await self._increment(product_id, quantity)

    async def _increment(self, product_id: ProductId, quantity: int) -> dict:
        if quantity < 1:
            return invalid_request("Quantity must be at least 1.")
        result = await self.db.execute(
            update(Product)
            .where(Product.id == product_id)
            .values(stock=Product.stock + quantity)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return not_found("Product", product_id)
        return ok_result(product_id=product_id, quantity=quantity)

    async def stock_of(self, product_id: ProductId) -> int | None:
        return await self.db.scalar(
            select(Product.stock).where(Product.id == product_id),
        )
