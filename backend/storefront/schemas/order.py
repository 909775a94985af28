"""Order Schemas — placement request, status change, and order/item responses.

Invariants:
    - PlaceOrderRequest has >= 1 line, every count >= 1
    - UpdateStatusRequest accepts any OrderStatus; the service rejects the ones
      that have dedicated operations (canceled, exchanged, refunded)
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from storefront.core.domain_types import OrderStatus
from storefront.schemas.common import PageMeta


class OrderLineRequest(BaseModel):
    product_id: UUID
    count: int = Field(1, ge=1)


class PlaceOrderRequest(BaseModel):
    lines: list[OrderLineRequest] = Field(min_length=1)
    destination: str = Field(min_length=1, max_length=500)
    deliver_request: str | None = Field(None, max_length=2000)


class PlaceOrderResponse(BaseModel):
    order_id: UUID
    total: int
    ordered_at: str


class UpdateStatusRequest(BaseModel):
    status: OrderStatus


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    order_id: UUID
    product_id: UUID
    consumer_id: UUID
    count: int
    unit_price: int
    status: OrderStatus
    created_at: datetime


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    consumer_id: UUID | None
    total: int
    destination: str
    deliver_request: str | None
    created_at: datetime
    ordered_at: str
    items: list[OrderItemResponse]


class OrderListResponse(PageMeta):
    orders: list[OrderResponse]


class OrderItemListResponse(PageMeta):
    order_items: list[OrderItemResponse]
