"""Product Catalog — provider-owned products, catalog listings, and restocking.

Invariants:
    - Only providers create products; the product belongs to the creating provider
    - Edit, delete, and restock: owning provider or admin
    - Edit touches name, price, and description only; stock moves only through
      InventoryLedger (reserve/release/restock)
    - A product with order history cannot be deleted (order items keep their product)
    - Listings are public and paginated like every other listing (fetch_page)
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.domain_types import Actor, ProductId, ProductSort, UserId, UserRole
from storefront.core.results import (
    forbidden, invalid_request, is_error, not_found, ok_result,
)
from storefront.models.order_item import OrderItem
from storefront.models.product import Product
from storefront.services.inventory_ledger import InventoryLedger
from storefront.services.order_queries import fetch_page
from storefront.services.storage_guard import storage_guard
from storefront.services.users import find_user

logger = logging.getLogger(__name__)

_ORDERINGS = {
    ProductSort.CREATED_AT_DESC: (Product.created_at.desc(), Product.id),
    ProductSort.PRICE_DESC: (Product.price.desc(), Product.id),
    ProductSort.PRICE_ASC: (Product.price.asc(), Product.id),
}


def check_owner_or_admin(actor: Actor, product: Product, action: str) -> dict | None:
    if product.provider_id != actor.id and not actor.is_admin:
        return forbidden(f"Only the owning provider can {action} this product.")
    return None


def escape_like(term: str) -> str:
    """Make % and _ in user input match literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ProductCatalog:
    """Product writes, lookups, and listings."""

    def __init__(self, db: AsyncSession, page_size: int = 10):
        self.db = db
        self.page_size = page_size
        self.ledger = InventoryLedger(db)

    @storage_guard("product creation")
    async def create_product(
        self,
        actor: Actor,
        name: str,
        price: int,
        stock: int,
        description: str | None = None,
    ) -> dict:
        if actor.role != UserRole.PROVIDER:
            return forbidden("Only providers can create products.")
        product = Product(
            provider_id=actor.id,
            name=name.strip(),
            description=description,
            price=price,
            stock=stock,
        )
        self.db.add(product)
        await self.db.commit()
        logger.info(
            "Product created",
            extra={"actor_id": actor.id, "product_id": product.id},
        )
        return ok_result(product=product)

    @storage_guard("product lookup")
    async def get_product(self, product_id: ProductId) -> dict:
        product = await self.db.get(Product, product_id)
        if not product:
            return not_found("Product", product_id)
        return ok_result(product=product)

    @storage_guard("provider product listing")
    async def list_products_for_provider(
        self,
        provider_id: UserId,
        page: int = 1,
        sort: ProductSort = ProductSort.CREATED_AT_DESC,
    ) -> dict:
        if not await find_user(self.db, provider_id, UserRole.PROVIDER):
            return not_found("Provider", provider_id)
        data = await fetch_page(
            self.db,
            select(Product).where(Product.provider_id == provider_id),
            _ORDERINGS[sort], max(page, 1), self.page_size,
        )
        return ok_result(products=data.pop("rows"), **data)

    @storage_guard("product search")
    async def search_products(
        self,
        term: str,
        page: int = 1,
        sort: ProductSort = ProductSort.CREATED_AT_DESC,
    ) -> dict:
        """Case-insensitive substring match on the product name."""
        term = term.strip()
        if not term:
            return invalid_request("A search term is required.")
        data = await fetch_page(
            self.db,
            select(Product).where(
                Product.name.ilike(f"%{escape_like(term)}%", escape="\\"),
            ),
            _ORDERINGS[sort], max(page, 1), self.page_size,
        )
        return ok_result(products=data.pop("rows"), **data)

    @storage_guard("product edit")
    async def edit_product(
        self,
        actor: Actor,
        product_id: ProductId,
        name: str | None = None,
        price: int | None = None,
        description: str | None = None,
    ) -> dict:
        """Change the descriptive fields. None leaves a field as it is."""
        if name is None and price is None and description is None:
            return invalid_request("Nothing to change.")
        if name is not None and not name.strip():
            return invalid_request("Product name cannot be blank.")
        if price is not None and price < 0:
            return invalid_request("Price cannot be negative.")

        product = await self.db.get(Product, product_id)
        if not product:
            return not_found("Product", product_id)
        error = check_owner_or_admin(actor, product, "edit")
        if error:
            return error

        if name is not None:
            product.name = name.strip()
        if price is not None:
            product.price = price
        if description is not None:
            product.description = description
        await self.db.commit()
        await self.db.refresh(product)
        logger.info(
            "Product edited",
            extra={"actor_id": actor.id, "product_id": product_id},
        )
        return ok_result(product=product)

    @storage_guard("product deletion")
    async def delete_product(self, actor: Actor, product_id: ProductId) -> dict:
        product = await self.db.get(Product, product_id)
        if not product:
            return not_found("Product", product_id)
        error = check_owner_or_admin(actor, product, "delete")
        if error:
            return error

        ordered = await self.db.scalar(
            select(func.count()).select_from(OrderItem)
            .where(OrderItem.product_id == product_id),
        )
        if ordered:
            return invalid_request(
                f"Product '{product_id}' has {ordered} order item(s) and cannot be deleted.",
            )
        await self.db.delete(product)
        await self.db.commit()
        logger.info(
            "Product deleted",
            extra={"actor_id": actor.id, "product_id": product_id},
        )
        return ok_result(product_id=product_id)

    @storage_guard("product restock")
    async def restock(self, actor: Actor, product_id: ProductId, quantity: int) -> dict:
        product = await self.db.get(Product, product_id)
        if not product:
            return not_found("Product", product_id)
        error = check_owner_or_admin(actor, product, "restock")
        if error:
            return error

        result = await self.ledger.restock(product_id, quantity)
        if is_error(result):
            await self.db.rollback()
            return result
        await self.db.commit()
        await self.db.refresh(product)
        logger.info(
            f"Product restocked by {quantity}",
            extra={"actor_id": actor.id, "product_id": product_id, "quantity": quantity},
        )
        return ok_result(product=product)
