"""Order Item State Machine — explicit (current, requested) -> rule table with role gating.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - TRANSITIONS is the single source of truth for legal moves
    - Any combination not in TRANSITIONS fails closed
    - Terminal states (canceled, exchanged, refunded) accept no transition
    - Evaluation order: terminal -> role can never reach target -> no rule -> role not allowed

Design Decisions:
    - Return error dicts (not exceptions), same as every other core check:
      services chain them with `or` and hand the first error back unchanged
    - Effects are declared in the table, services execute them
"""

from dataclasses import dataclass
from enum import Enum

from storefront.core.domain_types import (
    ErrorKind, OrderStatus, UserRole, TERMINAL_STATUSES,
)
from storefront.core.results import error_result


class TransitionEffect(str, Enum):
    """Side effect a service must apply after a successful transition."""
    NONE = "none"
    RELEASE_STOCK = "release_stock"
    CREATE_REFUND = "create_refund"


@dataclass(frozen=True)
class TransitionRule:
    roles: frozenset[UserRole]
    effect: TransitionEffect = TransitionEffect.NONE


_S = OrderStatus
_R = UserRole

_SHIPPING_SOURCES = (_S.RECEIVED, _S.DELIVERING, _S.DELIVERED)
_SHIPPING_TARGETS = (_S.DELIVERING, _S.DELIVERED)
_REFUNDABLE_SOURCES = (_S.CHECKING, _S.RECEIVED, _S.DELIVERING, _S.DELIVERED)
_REFUND_TARGETS = (_S.EXCHANGED, _S.REFUNDED)


TRANSITIONS: dict[tuple[OrderStatus, OrderStatus], TransitionRule] = {
    (_S.CHECKING, _S.CANCELED): TransitionRule(
        frozenset({_R.CONSUMER}), TransitionEffect.RELEASE_STOCK,
    ),
    (_S.CHECKING, _S.RECEIVED): TransitionRule(frozenset({_R.PROVIDER})),
    **{
        (current, target): TransitionRule(frozenset({_R.ADMIN}))
        for current in _SHIPPING_SOURCES
        for target in _SHIPPING_TARGETS
    },
    **{
        (current, target): TransitionRule(
            frozenset({_R.CONSUMER, _R.ADMIN}), TransitionEffect.CREATE_REFUND,
        )
        for current in _REFUNDABLE_SOURCES
        for target in _REFUND_TARGETS
    },
}


def targets_for_role(role: UserRole) -> frozenset[OrderStatus]:
    """Every status this role may request from some state."""
    return frozenset(
        target for (_, target), rule in TRANSITIONS.items()
        if role in rule.roles
    )


def check_not_terminal(current: OrderStatus) -> dict | None:
    if current in TERMINAL_STATUSES:
        return error_result(
            ErrorKind.INVALID_TRANSITION,
            f"Order item is already {current.value}; no further changes allowed.",
        )
    return None


def check_role_reaches_target(
    requested: OrderStatus, role: UserRole,
) -> dict | None:
    if requested not in targets_for_role(role):
        return error_result(
            ErrorKind.FORBIDDEN,
            f"Role '{role.value}' may not set status '{requested.value}'.",
        )
    return None


def check_rule_exists(
    current: OrderStatus, requested: OrderStatus,
) -> dict | None:
    if (current, requested) not in TRANSITIONS:
        return error_result(
            ErrorKind.INVALID_TRANSITION,
            f"Cannot move order item from '{current.value}' to '{requested.value}'.",
        )
    return None


def check_role_allowed(
    current: OrderStatus, requested: OrderStatus, role: UserRole,
) -> dict | None:
    if role not in TRANSITIONS[(current, requested)].roles:
        return error_result(
            ErrorKind.FORBIDDEN,
            f"Role '{role.value}' may not move order item "
            f"from '{current.value}' to '{requested.value}'.",
        )
    return None


def check_transition(
    current: OrderStatus, requested: OrderStatus, role: UserRole,
) -> dict | None:
    """Chain all transition checks. Returns first error or None."""
    return (
        check_not_terminal(current)
        or check_role_reaches_target(requested, role)
        or check_rule_exists(current, requested)
        or check_role_allowed(current, requested, role)
    )


def transition_effect(
    current: OrderStatus, requested: OrderStatus,
) -> TransitionEffect:
    """Effect of an already-validated transition."""
    return TRANSITIONS[(current, requested)].effect
