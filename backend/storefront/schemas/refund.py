"""Refund Schemas — refund/exchange request and responses.

Invariants:
    - Only the basic field types are validated here; the exchange/refund field
      combination is checked by core/refund_rules.py so it surfaces as INVALID_REQUEST
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from storefront.core.domain_types import RefundStatus
from storefront.core.refund_rules import RefundFields
from storefront.schemas.common import PageMeta
from storefront.schemas.order import OrderItemResponse


class RefundRequest(BaseModel):
    order_item_id: UUID
    status: RefundStatus
    problem_title: str = Field("", max_length=200)
    problem_description: str = Field("", max_length=5000)
    send_day: date | None = None
    send_place: str | None = Field(None, max_length=500)
    refund_pay: int | None = Field(None, ge=0)

    def to_fields(self) -> RefundFields:
        return RefundFields(
            problem_title=self.problem_title,
            problem_description=self.problem_description,
            send_day=self.send_day,
            send_place=self.send_place,
            refund_pay=self.refund_pay,
        )


class RefundResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    order_item_id: UUID
    refundee_id: UUID
    status: RefundStatus
    problem_title: str
    problem_description: str
    send_day: date | None
    send_place: str | None
    refund_pay: int | None
    created_at: datetime
    refunded_at: str


class RefundResultResponse(BaseModel):
    order_item: OrderItemResponse
    refund: RefundResponse


class RefundListResponse(PageMeta):
    refunds: list[RefundResponse]
