"""
Sort compiler.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from .models import FilterRequest


@dataclass(frozen=True)
class SortOrder:
    """Sort on one field."""
    field: str
    ascending: bool = True


@dataclass(frozen=True)
class SortSpec:
    """
    Ordered sort keys, primary first. An empty spec means unsorted.
    Duplicate fields are kept as given; the executor decides what they mean.
    """
    orders: Tuple[SortOrder, ...] = ()

    @classmethod
    def unsorted(cls) -> 'SortSpec':
        return cls()

    @classmethod
    def by(cls, field: str, ascending: bool = True) -> 'SortSpec':
        return cls((SortOrder(field, ascending),))

    @property
    def is_unsorted(self) -> bool:
        return not self.orders

    def __iter__(self):
        return iter(self.orders)

    def __len__(self):
        return len(self.orders)


def build_sort(request: FilterRequest, default_field: Optional[str] = None) -> SortSpec:
    """
    Build the sort for a request.

    Args:
        request: The filter request
        default_field: Field to sort ascending on when the request names no sort

    Returns:
        SortSpec, unsorted when there is neither a sort nor a usable default
    """
    if not request.sort_criteria:
        if default_field is not None and default_field.strip():
            return SortSpec.by(default_field)
        return SortSpec.unsorted()

    return SortSpec(tuple(
        SortOrder(criterion.field, criterion.ascending)
        for criterion in request.sort_criteria
    ))
