"""Root conftest — shared test configuration and database fixtures.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - Seed fixtures commit in their own session; services under test get their own
    - Stock is always read through a fresh session (never a stale identity map)

Design Decisions:
    - SQLite in-memory: fast, no external dependency; the conditional UPDATE and
      CHECK constraints behave the same as on PostgreSQL
"""

import os

os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)

from datetime import datetime, timezone  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy import select  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession, create_async_engine, async_sessionmaker,
)

from storefront.core.domain_types import Actor, UserRole  # noqa: E402
from storefront.db.base import Base  # noqa: E402
import storefront.models  # noqa: E402,F401
from storefront.models.order_item import OrderItem  # noqa: E402
from storefront.models.product import Product  # noqa: E402
from storefront.models.user import User  # noqa: E402
from storefront.services.order_placement import (  # noqa: E402
    OrderLine, OrderPlacement,
)

FIXED_NOW = datetime(2026, 3, 5, 14, 7, 30, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return FIXED_NOW


@pytest.fixture
def clock():
    """Clock pinned to 2026-03-05 14:07:30 UTC."""
    return fixed_clock


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


async def _add(factory, obj):
    async with factory() as session:
        session.add(obj)
        await session.commit()
        await session.refresh(obj)
    return obj


@pytest.fixture
def add_user(test_session_factory):
    async def _add_user(role: UserRole, name: str = "user"):
        return await _add(test_session_factory, User(
            email=f"{name}-{role.value}@example.com", name=name, role=role.value,
        ))
    return _add_user


@pytest.fixture
def add_product(test_session_factory):
    async def _add_product(provider: User, price: int, stock: int, name: str = "Product"):
        return await _add(test_session_factory, Product(
            provider_id=provider.id, name=name, price=price, stock=stock,
        ))
    return _add_product


@pytest.fixture
async def consumer(add_user):
    return await add_user(UserRole.CONSUMER, "alice")


@pytest.fixture
async def other_consumer(add_user):
    return await add_user(UserRole.CONSUMER, "bob")


@pytest.fixture
async def provider(add_user):
    return await add_user(UserRole.PROVIDER, "acme")


@pytest.fixture
async def other_provider(add_user):
    return await add_user(UserRole.PROVIDER, "globex")


@pytest.fixture
async def admin(add_user):
    return await add_user(UserRole.ADMIN, "root")


@pytest.fixture
async def product_a(add_product, provider):
    """Stock 5 at price 100."""
    return await add_product(provider, price=100, stock=5, name="Product A")


@pytest.fixture
async def product_b(add_product, provider):
    """Stock 1 at price 250."""
    return await add_product(provider, price=250, stock=1, name="Product B")


@pytest.fixture
def read_stock(test_session_factory):
    async def _read_stock(product_id):
        async with test_session_factory() as session:
            return await session.scalar(
                select(Product.stock).where(Product.id == product_id),
            )
    return _read_stock


@pytest.fixture
def read_items(test_session_factory):
    """All order items, optionally filtered by order id."""
    async def _read_items(order_id=None):
        async with test_session_factory() as session:
            query = select(OrderItem)
            if order_id is not None:
                query = query.where(OrderItem.order_id == order_id)
            result = await session.execute(query)
            return list(result.scalars().all())
    return _read_items


@pytest.fixture
def place_order(test_session_factory):
    """Place an order in its own session. lines: [(product, count), ...]."""
    async def _place_order(user: User, lines, destination="221B Baker Street", clock=fixed_clock):
        async with test_session_factory() as session:
            return await OrderPlacement(session, clock=clock).place_order(
                Actor.from_record(user),
                [OrderLine(product.id, count) for product, count in lines],
                destination,
                "Leave at the door",
            )
    return _place_order


@pytest.fixture
def placed_item(place_order, read_items):
    """Place a single-line order and return its OrderItem."""
    async def _placed_item(user: User, product: Product, count: int = 1):
        result = await place_order(user, [(product, count)])
        assert result["status"] == "ok", result
        items = await read_items(result["order_id"])
        return items[0]
    return _placed_item
