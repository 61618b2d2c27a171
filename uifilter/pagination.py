"""
Pagination resolver.
"""

from dataclasses import dataclass
from typing import Optional

from .models import FilterRequest


@dataclass(frozen=True)
class PageWindow:
    """Zero-based page index and page size."""
    index: int
    size: int

    @property
    def offset(self) -> int:
        """Index of the first row of the page."""
        return self.index * self.size


def resolve_pagination(request: FilterRequest) -> Optional[PageWindow]:
    """
    Convert the request's offset and page size into a page window.

    Returns None when the page size is 0, meaning every matching row is
    wanted. An offset that is not a multiple of the page size lands on the
    page containing it, so the window may start before the requested offset.
    """
    if not request.page_size:
        return None
    return PageWindow(index=request.offset // request.page_size, size=request.page_size)
