"""Service Results — uniform success/error envelope returned by every service call.

Invariants:
    - Success: {"status": "ok", **payload}
    - Error: {"status": "error", "error_code": ErrorKind.value, "message": str}
    - Services never raise for domain failures; they return error results

Design Decisions:
    - Plain dicts over result classes: the error path and the success path have
      the same shape, and the API layer maps error_code to HTTP exceptions
"""

from typing import Any

from storefront.core.domain_types import ErrorKind


def ok_result(**payload: Any) -> dict:
    """Build a success result carrying the given payload keys."""
    return {"status": "ok", **payload}


def error_result(kind: ErrorKind, message: str) -> dict:
    """Build an error result for the given error kind."""
    return {
        "status": "error",
        "error_code": kind.value,
        "message": message,
    }


def is_error(result: dict | None) -> bool:
    return result is not None and result.get("status") == "error"


def not_found(resource_type: str, resource_id: object) -> dict:
    return error_result(
        ErrorKind.NOT_FOUND, f"{resource_type} '{resource_id}' not found",
    )


def forbidden(message: str) -> dict:
    return error_result(ErrorKind.FORBIDDEN, message)


def invalid_request(message: str) -> dict:
    return error_result(ErrorKind.INVALID_REQUEST, message)


def storage_error(operation: str) -> dict:
    """Generic storage failure; never carries driver details."""
    return error_result(
        ErrorKind.STORAGE_ERROR, f"Storage failure during {operation}",
    )
