"""Shared response pieces."""

from pydantic import BaseModel


class PageMeta(BaseModel):
    """Pagination keys every list response carries (see core/pagination.py)."""
    total_count: int
    total_pages: int
    has_next: bool
    has_prev: bool
    next_page: int | None
    prev_page: int | None
    shown_count: int
