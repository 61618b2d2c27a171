"""
Compiled query plans and the executor contract that consumes them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Optional

from .pagination import PageWindow
from .predicate import Predicate
from .sort import SortSpec


@dataclass(frozen=True)
class QueryPlan:
    """
    Everything an executor needs to run a filter request.

    Attributes:
        predicate: Filter predicate, None matches every row
        sort: Sort order
        page: Page window, None fetches every matching row
    """
    predicate: Optional[Predicate] = None
    sort: SortSpec = field(default_factory=SortSpec)
    page: Optional[PageWindow] = None


@dataclass
class FilterResult:
    """One page of records plus the total number of matching records."""
    records: List[Any]
    total_records: int


class QueryExecutor(ABC):
    """
    Runs compiled plans against a data source.
    """

    @abstractmethod
    async def find(self, plan: QueryPlan) -> List[Any]:
        """
        Fetch the rows matched by a plan, sorted and paginated as it says.
        """
        pass

    @abstractmethod
    async def count(self, predicate: Optional[Predicate]) -> int:
        """
        Count the rows matched by a predicate, ignoring pagination.
        """
        pass
