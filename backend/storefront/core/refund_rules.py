"""Refund Rules — pure precondition checks for refund/exchange requests.

Invariants:
    - All functions are PURE: no IO, no async, no DB
    - exchanged requires send_day AND send_place, forbids refund_pay
    - refunded requires refund_pay, forbids send_day and send_place
    - exchanged/refunded items can never be refunded again
"""

from dataclasses import dataclass
from datetime import date

from storefront.core.domain_types import (
    ErrorKind, OrderStatus, RefundStatus, UserRole,
)
from storefront.core.results import error_result, forbidden, invalid_request


@dataclass(frozen=True)
class RefundFields:
    """Type-specific fields supplied with a refund request."""
    problem_title: str = ""
    problem_description: str = ""
    send_day: date | None = None
    send_place: str | None = None
    refund_pay: int | None = None


def check_refund_role(role: UserRole) -> dict | None:
    if role != UserRole.CONSUMER:
        return forbidden("Only consumers can request a refund or exchange.")
    return None


def check_refund_fields(
    status: RefundStatus, fields: RefundFields,
) -> dict | None:
    """Field shape must match the requested refund status."""
    has_pickup = fields.send_day is not None and bool(fields.send_place)
    has_any_pickup = fields.send_day is not None or bool(fields.send_place)
    has_pay = fields.refund_pay is not None

    if status == RefundStatus.EXCHANGED:
        if has_pay or not has_pickup:
            return invalid_request(
                "An exchange requires send_day and send_place "
                "and must not carry refund_pay.",
            )
    elif status == RefundStatus.REFUNDED:
        if has_any_pickup or not has_pay:
            return invalid_request(
                "A refund requires refund_pay "
                "and must not carry send_day or send_place.",
            )
    return None


def check_not_finalized(current: OrderStatus) -> dict | None:
    if current in (OrderStatus.EXCHANGED, OrderStatus.REFUNDED):
        return error_result(
            ErrorKind.ALREADY_FINALIZED,
            f"Order item was already {current.value}.",
        )
    return None


def validate_refund_request(
    role: UserRole, status: RefundStatus, fields: RefundFields,
) -> dict | None:
    """Checks that need no stored state. Returns first error or None."""
    return check_refund_role(role) or check_refund_fields(status, fields)
