"""
UI Filter
Compiles UI table pagination, sort and filter requests into backend-neutral
query plans.
"""

from .compiler import PredicateCompiler
from .config import Config
from .exceptions import (
    FieldResolutionError,
    InvalidFilterError,
    UIFilterError,
    UnsupportedMatchModeError,
    UnsupportedOperatorError,
    ValueShapeError,
)
from .models import (
    FilterCriterion,
    FilterOperator,
    FilterRequest,
    FilterRequestBuilder,
    MatchMode,
    SortCriterion,
)
from .pagination import PageWindow, resolve_pagination
from .plan import FilterResult, QueryExecutor, QueryPlan
from .predicate import Comparison, Junction, Predicate, PredicateBackend, PredicateOperator
from .resolver import (
    CompositeFieldResolver,
    FieldResolver,
    FieldValueCategory,
    MappingFieldResolver,
    category_for_type,
)
from .service import UIFilterService
from .sort import SortOrder, SortSpec, build_sort

__version__ = "1.0.0"

__all__ = [
    "UIFilterService",
    "PredicateCompiler",
    "Config",
    "FilterRequest",
    "FilterRequestBuilder",
    "FilterCriterion",
    "SortCriterion",
    "MatchMode",
    "FilterOperator",
    "FieldResolver",
    "FieldValueCategory",
    "MappingFieldResolver",
    "CompositeFieldResolver",
    "category_for_type",
    "Predicate",
    "Comparison",
    "Junction",
    "PredicateOperator",
    "PredicateBackend",
    "SortOrder",
    "SortSpec",
    "build_sort",
    "PageWindow",
    "resolve_pagination",
    "QueryPlan",
    "QueryExecutor",
    "FilterResult",
    "UIFilterError",
    "InvalidFilterError",
    "FieldResolutionError",
    "UnsupportedMatchModeError",
    "ValueShapeError",
    "UnsupportedOperatorError",
]
