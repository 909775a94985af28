"""Refund Routes — refund/exchange requests and refund listings."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from storefront.api.dependencies import (
    get_actor, get_refund_coordinator, get_refund_queries,
)
from storefront.api.results import unwrap
from storefront.core.domain_types import Actor
from storefront.schemas.order import OrderItemListResponse, OrderItemResponse
from storefront.schemas.refund import (
    RefundListResponse, RefundRequest, RefundResponse, RefundResultResponse,
)
from storefront.services.refund_coordinator import RefundCoordinator
from storefront.services.refund_queries import RefundQueries

router = APIRouter(prefix="/api/v1", tags=["refunds"])


@router.post(
    "/refunds", response_model=RefundResultResponse,
    status_code=status.HTTP_201_CREATED,
)
async def request_refund(
    body: RefundRequest,
    actor: Actor = Depends(get_actor),
    coordinator: RefundCoordinator = Depends(get_refund_coordinator),
):
    """Request an exchange or a monetary refund for one order item."""
    result = unwrap(
        await coordinator.request_refund_or_exchange(
            actor, body.order_item_id, body.status, body.to_fields(),
        ),
        actor, body.order_item_id,
    )
    return RefundResultResponse(
        order_item=OrderItemResponse.model_validate(result["order_item"]),
        refund=RefundResponse.model_validate(result["refund"]),
    )


@router.get("/consumers/{consumer_id}/refunds", response_model=RefundListResponse)
async def list_consumer_refunds(
    consumer_id: UUID,
    page: int = Query(1, ge=1),
    actor: Actor = Depends(get_actor),
    queries: RefundQueries = Depends(get_refund_queries),
):
    result = unwrap(
        await queries.list_refunds_for_consumer(actor, consumer_id, page),
        actor, consumer_id,
    )
    return RefundListResponse.model_validate(result, from_attributes=True)


@router.get(
    "/providers/{provider_id}/refunds", response_model=OrderItemListResponse,
)
async def list_provider_refunds(
    provider_id: UUID,
    page: int = Query(1, ge=1),
    actor: Actor = Depends(get_actor),
    queries: RefundQueries = Depends(get_refund_queries),
):
    result = unwrap(
        await queries.list_refunds_for_provider(actor, provider_id, page),
        actor, provider_id,
    )
    return OrderItemListResponse.model_validate(result, from_attributes=True)
