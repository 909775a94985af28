"""Refund ORM — exchange or monetary refund record for one order item.

Invariants:
    - order_item_id is unique: at most one refund per order item
    - status in {exchanged, refunded} and equals the linked item's status
    - exchanged rows carry send_day + send_place; refunded rows carry refund_pay
    - refunded_at is derived from created_at and written in the same INSERT
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import String, Text, Integer, Date, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from storefront.db.base import Base


class Refund(Base):
    """Refund entity."""
    __tablename__ = "refunds"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    order_item_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("order_items.id", ondelete="CASCADE"),
        nullable=False, unique=True,
    )
    refundee_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    problem_title: Mapped[str] = mapped_column(
        String(200), nullable=False, default="",
    )
    problem_description: Mapped[str] = mapped_column(
        Text, nullable=False, default="",
    )
    send_day: Mapped[date | None] = mapped_column(Date, nullable=True)
    send_place: Mapped[str | None] = mapped_column(String(500), nullable=True)
    refund_pay: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    refunded_at: Mapped[str] = mapped_column(String(32), nullable=False)
