"""Result Unwrapping — turns service error results into typed exceptions."""

from storefront.core.domain_types import Actor
from storefront.core.errors import ErrorContext, error_for_code
from storefront.core.results import is_error


def unwrap(
    result: dict, actor: Actor | None = None, resource_id: object = None,
) -> dict:
    """Return the result unchanged on success, raise its StorefrontError otherwise."""
    if is_error(result):
        raise error_for_code(
            result["error_code"],
            result["message"],
            ErrorContext(
                actor_id=actor.id if actor else None,
                resource_id=str(resource_id) if resource_id else None,
            ),
        )
    return result
