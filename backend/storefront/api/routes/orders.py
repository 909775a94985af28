"""Order Routes — placement, lookups, cancellation, and fulfillment status.

Invariants:
    - Every endpoint requires a resolved caller (get_actor)
    - Service error results are raised as StorefrontError via unwrap()
    - page query parameters are 1-based
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from storefront.api.dependencies import (
    get_actor, get_order_placement, get_order_queries, get_order_status,
)
from storefront.api.results import unwrap
from storefront.core.domain_types import Actor, ProductId
from storefront.schemas.order import (
    OrderItemListResponse, OrderItemResponse, OrderListResponse,
    OrderResponse, PlaceOrderRequest, PlaceOrderResponse, UpdateStatusRequest,
)
from storefront.services.order_placement import OrderLine, OrderPlacement
from storefront.services.order_queries import OrderQueries
from storefront.services.order_status import OrderStatusService

router = APIRouter(prefix="/api/v1", tags=["orders"])


@router.post(
    "/orders", response_model=PlaceOrderResponse,
    status_code=status.HTTP_201_CREATED,
)
async def place_order(
    body: PlaceOrderRequest,
    actor: Actor = Depends(get_actor),
    placement: OrderPlacement = Depends(get_order_placement),
):
    """Place an order; all lines are reserved or none are."""
    lines = [OrderLine(ProductId(line.product_id), line.count) for line in body.lines]
    result = unwrap(
        await placement.place_order(
            actor, lines, body.destination, body.deliver_request,
        ),
        actor,
    )
    return PlaceOrderResponse(
        order_id=result["order_id"],
        total=result["total"],
        ordered_at=result["ordered_at"],
    )


@router.get("/orders/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: UUID,
    actor: Actor = Depends(get_actor),
    queries: OrderQueries = Depends(get_order_queries),
):
    result = unwrap(await queries.find_order_by_id(actor, order_id), actor, order_id)
    return OrderResponse.model_validate(result["order"])


@router.get("/consumers/{consumer_id}/orders", response_model=OrderListResponse)
async def list_consumer_orders(
    consumer_id: UUID,
    page: int = Query(1, ge=1),
    actor: Actor = Depends(get_actor),
    queries: OrderQueries = Depends(get_order_queries),
):
    result = unwrap(
        await queries.list_orders_for_consumer(actor, consumer_id, page),
        actor, consumer_id,
    )
    return OrderListResponse.model_validate(result, from_attributes=True)


@router.get(
    "/providers/{provider_id}/order-items", response_model=OrderItemListResponse,
)
async def list_provider_order_items(
    provider_id: UUID,
    page: int = Query(1, ge=1),
    actor: Actor = Depends(get_actor),
    queries: OrderQueries = Depends(get_order_queries),
):
    result = unwrap(
        await queries.list_order_items_for_provider(actor, provider_id, page),
        actor, provider_id,
    )
    return OrderItemListResponse.model_validate(result, from_attributes=True)


@router.get("/order-items/{order_item_id}", response_model=OrderItemResponse)
async def get_order_item(
    order_item_id: UUID,
    actor: Actor = Depends(get_actor),
    queries: OrderQueries = Depends(get_order_queries),
):
    result = unwrap(
        await queries.find_order_item_by_id(actor, order_item_id),
        actor, order_item_id,
    )
    return OrderItemResponse.model_validate(result["order_item"])


@router.post(
    "/order-items/{order_item_id}/cancel", response_model=OrderItemResponse,
)
async def cancel_order_item(
    order_item_id: UUID,
    actor: Actor = Depends(get_actor),
    service: OrderStatusService = Depends(get_order_status),
):
    """Cancel a checking item; its stock is returned."""
    result = unwrap(
        await service.cancel_order_item(actor, order_item_id),
        actor, order_item_id,
    )
    return OrderItemResponse.model_validate(result["order_item"])


@router.patch(
    "/order-items/{order_item_id}/status", response_model=OrderItemResponse,
)
async def update_order_item_status(
    order_item_id: UUID,
    body: UpdateStatusRequest,
    actor: Actor = Depends(get_actor),
    service: OrderStatusService = Depends(get_order_status),
):
    result = unwrap(
        await service.update_order_item_status(actor, order_item_id, body.status),
        actor, order_item_id,
    )
    return OrderItemResponse.model_validate(result["order_item"])
