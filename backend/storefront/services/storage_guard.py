"""Storage Guard — turns unexpected SQLAlchemy failures into STORAGE_ERROR results.

Invariants:
    - The wrapped method's session is rolled back before the result is returned
    - Driver details are logged, never returned
    - No automatic retry: retries are a caller policy
"""

import logging
from functools import wraps

from sqlalchemy.exc import SQLAlchemyError

from storefront.core.results import storage_error

logger = logging.getLogger(__name__)


def storage_guard(operation: str):
    """Decorate an async service method whose instance exposes `self.db`."""
    def deco(fn):
        @wraps(fn)
        async def wrapper(self, *args, **kwargs):
            try:
                return await fn(self, *args, **kwargs)
            except SQLAlchemyError as e:
                await self.db.rollback()
                logger.error(
                    f"Storage failure during {operation}: {e}",
                    exc_info=True,
                    extra={"error_code": "STORAGE_ERROR"},
                )
                return storage_error(operation)
        return wrapper
    return deco
