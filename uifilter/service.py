#!/usr/bin/env python3
"""
UIFilterService: compiles filter requests into query plans and runs them
through a QueryExecutor.
"""

import logging
from typing import Any, Iterable, List, Optional

from .compiler import PredicateCompiler
from .models import FilterRequest
from .pagination import resolve_pagination
from .plan import FilterResult, QueryExecutor, QueryPlan
from .resolver import FieldResolver
from .sort import SortSpec, build_sort


class UIFilterService:
    """
    Entry point for serving UI table loads.

    Example:
        service = UIFilterService(resolver, global_attributes=['name', 'power'])
        result = await service.find_page(FilterRequest.from_dict(payload), executor)
    """

    def __init__(self,
                 resolver: FieldResolver,
                 global_attributes: Iterable[str] = (),
                 default_sort_field: Optional[str] = None):
        """
        Initialize the service.

        Args:
            resolver: Resolves field names for the compiler
            global_attributes: Attributes searched by a global search field
            default_sort_field: Sort field used when a request names none
        """
        self.resolver = resolver
        self.compiler = PredicateCompiler(global_attributes)
        self.default_sort_field = default_sort_field
        self.logger = logging.getLogger(__name__)

    def build_sort(self, request: FilterRequest, default_field: Optional[str] = None) -> SortSpec:
        return build_sort(request, default_field or self.default_sort_field)

    def build_plan(self, request: FilterRequest, default_field: Optional[str] = None) -> QueryPlan:
        """
        Compile a request into a query plan.

        Args:
            request: The filter request
            default_field: Overrides the service's default sort field

        Returns:
            QueryPlan with predicate, sort and page window
        """
        plan = QueryPlan(
            predicate=self.compiler.compile(request, self.resolver),
            sort=self.build_sort(request, default_field),
            page=resolve_pagination(request),
        )
        self.logger.debug(f"Built query plan: {plan}")
        return plan

    async def find_by_filter(self,
                             request: FilterRequest,
                             executor: QueryExecutor,
                             default_field: Optional[str] = None) -> List[Any]:
        """Fetch the records for a request, paginating if it asks for a page."""
        return await executor.find(self.build_plan(request, default_field))

    async def count_by_filter(self, request: FilterRequest, executor: QueryExecutor) -> int:
        """Count every record matched by a request, so the UI knows how many pages exist."""
        return await executor.count(self.compiler.compile(request, self.resolver))

    async def find_page(self,
                        request: FilterRequest,
                        executor: QueryExecutor,
                        default_field: Optional[str] = None) -> FilterResult:
        """Fetch a page of records together with the total record count."""
        plan = self.build_plan(request, default_field)
        records = await executor.find(plan)
        total = await executor.count(plan.predicate)
        return FilterResult(records=records, total_records=total)
