"""Request Dependencies — caller resolution and per-request service construction.

Invariants:
    - The caller is identified by the X-User-Id header, set by the upstream
      authentication gateway; the role always comes from the users table
    - Malformed or unknown callers -> 401 (AuthenticationRequiredError)
    - The caller lookup runs through UserDirectory, so storage failures
      surface as STORAGE_ERROR like any other service call
    - Services are constructed per request with that request's AsyncSession
"""

from uuid import UUID

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.results import unwrap
from storefront.config import get_settings
from storefront.core.domain_types import Actor, ErrorKind, UserId
from storefront.core.errors import AuthenticationRequiredError
from storefront.infrastructure.database import get_db
from storefront.services.order_placement import OrderPlacement
from storefront.services.order_queries import OrderQueries
from storefront.services.order_status import OrderStatusService
from storefront.services.products import ProductCatalog
from storefront.services.refund_coordinator import RefundCoordinator
from storefront.services.refund_queries import RefundQueries
from storefront.services.users import UserDirectory


def get_order_placement(db: AsyncSession = Depends(get_db)) -> OrderPlacement:
    return OrderPlacement(db)


def get_order_status(db: AsyncSession = Depends(get_db)) -> OrderStatusService:
    return OrderStatusService(db)


def get_refund_coordinator(db: AsyncSession = Depends(get_db)) -> RefundCoordinator:
    return RefundCoordinator(db)


def get_order_queries(db: AsyncSession = Depends(get_db)) -> OrderQueries:
    return OrderQueries(db, page_size=get_settings().page_size)


def get_refund_queries(db: AsyncSession = Depends(get_db)) -> RefundQueries:
    return RefundQueries(db, page_size=get_settings().page_size)


def get_product_catalog(db: AsyncSession = Depends(get_db)) -> ProductCatalog:
    return ProductCatalog(db, page_size=get_settings().page_size)


def get_user_directory(db: AsyncSession = Depends(get_db)) -> UserDirectory:
    return UserDirectory(db)


async def get_optional_actor(
    x_user_id: str | None = Header(None),
    users: UserDirectory = Depends(get_user_directory),
) -> Actor | None:
    """Resolve the caller when the header is present; None for anonymous requests."""
    if not x_user_id:
        return None
    try:
        user_id = UserId(UUID(x_user_id))
    except ValueError:
        raise AuthenticationRequiredError("Malformed X-User-Id header")

    result = await users.resolve_actor(user_id)
    if result.get("error_code") == ErrorKind.NOT_FOUND.value:
        raise AuthenticationRequiredError("Unknown caller")
    return unwrap(result)["actor"]


async def get_actor(actor: Actor | None = Depends(get_optional_actor)) -> Actor:
    """Resolve the authenticated caller."""
    if actor is None:
        raise AuthenticationRequiredError("Missing X-User-Id header")
    return actor
