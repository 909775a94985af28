"""Pagination — page metadata computed from total count, page size, and current page.

Invariants:
    - Pages are 1-based; page >= 1 and page_size >= 1 are caller preconditions
    - total_pages = ceil(total_count / page_size)
    - shown_count = min(page_size * page, total_count)
    - has_next iff page_size * page < total_count; has_prev iff page > 1
"""

import math
from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class PageInfo:
    total_pages: int
    has_next: bool
    has_prev: bool
    next_page: int | None
    prev_page: int | None
    shown_count: int

    def to_dict(self) -> dict:
        return asdict(self)


def paginate(page: int, page_size: int, total_count: int) -> PageInfo:
    """Compute page metadata. Pure."""
    seen = page_size * page
    has_next = seen < total_count
    has_prev = page > 1
    return PageInfo(
        total_pages=math.ceil(total_count / page_size),
        has_next=has_next,
        has_prev=has_prev,
        next_page=page + 1 if has_next else None,
        prev_page=page - 1 if has_prev else None,
        shown_count=min(seen, total_count),
    )


def page_offset(page: int, page_size: int) -> int:
    """Row offset for a 1-based page."""
    return (page - 1) * page_size
