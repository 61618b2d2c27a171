#!/usr/bin/env python3
"""
Filter request model.

Immutable value objects describing what a UI table asks for: the window of
rows to load, the sort order, and the per-field filter criteria. Requests can
be built in code with FilterRequestBuilder, decoded from the JSON wire shape
with FilterRequest.from_dict, or converted from a PrimeNG lazy-load event.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Optional, Tuple, Union

from .exceptions import InvalidFilterError


class MatchMode(Enum):
    """Comparison requested by a single filter criterion."""
    EQUALS = "equals"
    NOT_EQUALS = "notEquals"
    CONTAINS = "contains"
    NOT_CONTAINS = "notContains"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"
    LT = "lt"
    LTE = "lte"
    GT = "gt"
    GTE = "gte"
    BETWEEN = "between"
    IN = "in"

    @classmethod
    def is_valid(cls, value: str) -> bool:
        """Check if a string names a match mode (aliases included)."""
        if not isinstance(value, str):
            return False
        return value in _MATCH_MODE_ALIASES or value in {mode.value for mode in cls}

    @classmethod
    def from_string(cls, value: Union[str, 'MatchMode', None]) -> Optional['MatchMode']:
        """
        Convert a UI match mode name to a MatchMode.

        Date-oriented names used by PrimeNG tables ('dateAfter', 'is', ...)
        are folded onto their generic equivalent.

        Raises:
            InvalidFilterError: If the name is unknown
        """
        if value is None or isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise InvalidFilterError(f"Match mode must be a string, got {value!r}")
        value = _MATCH_MODE_ALIASES.get(value, value)
        for mode in cls:
            if mode.value == value:
                return mode
        raise InvalidFilterError(f"Unknown match mode: {value}")


_MATCH_MODE_ALIASES = {
    'after': 'gt',
    'dateAfter': 'gt',
    'before': 'lt',
    'dateBefore': 'lt',
    'is': 'equals',
    'dateIs': 'equals',
    'isNot': 'notEquals',
    'dateIsNot': 'notEquals',
}


class FilterOperator(Enum):
    """Boolean operator used to combine the criteria supplied for one field."""
    AND = "and"
    OR = "or"

    @classmethod
    def from_string(cls, value: Union[str, 'FilterOperator', None]) -> Optional['FilterOperator']:
        if value is None or isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise InvalidFilterError(f"Filter operator must be a string, got {value!r}")
        for op in cls:
            if op.value == value:
                return op
        raise InvalidFilterError(f"Unknown filter operator: {value}")


@dataclass(frozen=True)
class SortCriterion:
    """
    One sort key.

    Attributes:
        field: Field to sort on
        direction: Positive or None sorts ascending, zero or negative descending
    """
    field: str
    direction: Optional[int] = 1

    def __post_init__(self):
        if not isinstance(self.field, str) or not self.field:
            raise InvalidFilterError(f"Sort field must be a non-empty string, got {self.field!r}")
        if self.direction is not None and (
                isinstance(self.direction, bool) or not isinstance(self.direction, int)):
            raise InvalidFilterError(f"Sort direction must be an integer, got {self.direction!r}")

    @property
    def ascending(self) -> bool:
        return self.direction is None or self.direction > 0

    @classmethod
    def from_dict(cls, data: Mapping) -> 'SortCriterion':
        if not isinstance(data, Mapping):
            raise InvalidFilterError(f"Sort entries must be objects, got {type(data).__name__}")
        return cls(data.get('field'), data.get('order'))

    def to_dict(self) -> Dict[str, Any]:
        return {'field': self.field, 'order': self.direction}


@dataclass(frozen=True)
class FilterCriterion:
    """
    One filter criterion for a field.

    The shape of ``value`` depends on the match mode: ``between`` takes a
    two element pair, ``in`` takes a list, everything else a scalar. List
    values are stored as tuples.
    """
    value: Any
    match_mode: Optional[MatchMode] = None
    operator: Optional[FilterOperator] = None

    def __post_init__(self):
        object.__setattr__(self, 'match_mode', MatchMode.from_string(self.match_mode))
        object.__setattr__(self, 'operator', FilterOperator.from_string(self.operator))
        if isinstance(self.value, list):
            object.__setattr__(self, 'value', tuple(self.value))

    @classmethod
    def from_dict(cls, data: Mapping) -> 'FilterCriterion':
        if not isinstance(data, Mapping):
            raise InvalidFilterError(f"Filter entries must be objects, got {type(data).__name__}")
        return cls(data.get('value'), data.get('matchMode'), data.get('operator'))

    def to_dict(self) -> Dict[str, Any]:
        value = list(self.value) if isinstance(self.value, tuple) else self.value
        return {
            'value': value,
            'matchMode': self.match_mode.value if self.match_mode else None,
            'operator': self.operator.value if self.operator else None,
        }


def _non_negative(name: str, value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidFilterError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise InvalidFilterError(f"{name} must be non-negative, got {value}")
    return value


def _has_value(value: Any) -> bool:
    # Mirrors the UI's truthiness check, where an empty list still counts.
    if isinstance(value, (list, tuple)):
        return True
    return value is not None and value != '' and value is not False and value != 0


@dataclass(frozen=True)
class FilterRequest:
    """
    Pagination, sort and filter criteria for one UI table load.

    Attributes:
        offset: Index of the first record to load
        page_size: Number of records to load, 0 for all of them
        sort_criteria: Sort keys, primary first
        field_criteria: Field name to its ordered criteria
        global_field_name: Key in field_criteria that stands for a global search
    """
    offset: int = 0
    page_size: int = 0
    sort_criteria: Tuple[SortCriterion, ...] = ()
    field_criteria: Mapping[str, Tuple[FilterCriterion, ...]] = field(default_factory=dict)
    global_field_name: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'offset', _non_negative('offset', self.offset))
        object.__setattr__(self, 'page_size', _non_negative('page_size', self.page_size))

        sort_criteria = tuple(self.sort_criteria or ())
        for criterion in sort_criteria:
            if not isinstance(criterion, SortCriterion):
                raise InvalidFilterError(f"Expected SortCriterion, got {type(criterion).__name__}")
        object.__setattr__(self, 'sort_criteria', sort_criteria)

        if self.field_criteria is not None and not isinstance(self.field_criteria, Mapping):
            raise InvalidFilterError("field_criteria must be a mapping")
        normalized = {}
        for key, criteria in (self.field_criteria or {}).items():
            if not isinstance(key, str):
                raise InvalidFilterError(f"Filter keys must be strings, got {key!r}")
            criteria = tuple(criteria or ())
            for criterion in criteria:
                if not isinstance(criterion, FilterCriterion):
                    raise InvalidFilterError(
                        f"Expected FilterCriterion for {key}, got {type(criterion).__name__}"
                    )
            # An empty list is the same as no entry at all
            if criteria:
                normalized[key] = criteria
        # Read-only view so a built request cannot gain or lose fields
        object.__setattr__(self, 'field_criteria', MappingProxyType(normalized))

    def __hash__(self):
        return hash((self.offset, self.page_size, self.sort_criteria,
                     tuple(self.field_criteria.items()), self.global_field_name))

    @classmethod
    def builder(cls) -> 'FilterRequestBuilder':
        return FilterRequestBuilder()

    @classmethod
    def from_dict(cls, payload: Mapping) -> 'FilterRequest':
        """
        Decode the JSON wire shape of a filter request.

        Unknown keys are ignored so that newer clients can talk to older
        servers.

        Args:
            payload: Dict with first, rows, sortFields, filters, globalFieldName

        Returns:
            FilterRequest

        Raises:
            InvalidFilterError: If the payload is malformed
        """
        if not isinstance(payload, Mapping):
            raise InvalidFilterError(f"Expected an object, got {type(payload).__name__}")

        sort_fields = payload.get('sortFields') or []
        if not isinstance(sort_fields, list):
            raise InvalidFilterError("sortFields must be a list")

        filters = payload.get('filters') or {}
        if not isinstance(filters, Mapping):
            raise InvalidFilterError("filters must be an object")

        field_criteria = {}
        for key, entries in filters.items():
            if isinstance(entries, Mapping):
                entries = [entries]
            if not isinstance(entries, list):
                raise InvalidFilterError(f"Criteria for {key} must be a list")
            field_criteria[key] = [FilterCriterion.from_dict(entry) for entry in entries]

        return cls(
            offset=payload.get('first'),
            page_size=payload.get('rows'),
            sort_criteria=tuple(SortCriterion.from_dict(entry) for entry in sort_fields),
            field_criteria=field_criteria,
            global_field_name=payload.get('globalFieldName'),
        )

    @classmethod
    def from_lazy_load_event(cls, event: Mapping) -> 'FilterRequest':
        """
        Convert a PrimeNG table lazy-load event into a filter request.

        PrimeNG names its global filter "global". Criteria without a value
        are dropped, and so are fields left without criteria.
        """
        first = event.get('first')
        rows = event.get('rows')
        last = event.get('last')
        if rows:
            page_size = rows
        elif last and first:
            page_size = last - first
        elif last:
            page_size = last
        else:
            page_size = 0

        sort_criteria = []
        if event.get('multiSortMeta'):
            for meta in event['multiSortMeta']:
                sort_criteria.append(SortCriterion(meta.get('field'), meta.get('order')))
        elif event.get('sortField') and event.get('sortOrder'):
            sort_field = event['sortField']
            if not isinstance(sort_field, str):
                sort_field = sort_field[0]
            sort_criteria.append(SortCriterion(sort_field, event['sortOrder']))

        global_field_name = None
        field_criteria = {}
        if event.get('filters'):
            global_field_name = 'global'
            for key, meta in event['filters'].items():
                if not meta:
                    continue
                meta_list = meta if isinstance(meta, list) else [meta]
                criteria = [
                    FilterCriterion(md.get('value'), md.get('matchMode'), md.get('operator'))
                    for md in meta_list
                    if _has_value(md.get('value'))
                ]
                if criteria:
                    field_criteria[key] = criteria

        return cls(
            offset=first,
            page_size=page_size,
            sort_criteria=tuple(sort_criteria),
            field_criteria=field_criteria,
            global_field_name=global_field_name,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Encode to the JSON wire shape."""
        return {
            'first': self.offset,
            'rows': self.page_size,
            'sortFields': [criterion.to_dict() for criterion in self.sort_criteria],
            'filters': {
                key: [criterion.to_dict() for criterion in criteria]
                for key, criteria in self.field_criteria.items()
            },
            'globalFieldName': self.global_field_name,
        }


class FilterRequestBuilder:
    """
    Fluent builder for FilterRequest.

    Repeated add_filter calls for the same key append to that key's list;
    keys keep the order in which they were first added.
    """

    def __init__(self):
        self._first = 0
        self._rows = 0
        self._sort_fields: List[SortCriterion] = []
        self._filters: Dict[str, List[FilterCriterion]] = {}
        self._global_field_name: Optional[str] = None

    def first(self, first: int) -> 'FilterRequestBuilder':
        self._first = first
        return self

    def rows(self, rows: int) -> 'FilterRequestBuilder':
        self._rows = rows
        return self

    def add_sort_field(self, field_name: str, order: Optional[int] = 1) -> 'FilterRequestBuilder':
        self._sort_fields.append(SortCriterion(field_name, order))
        return self

    def add_filter(self, key: str, criterion: FilterCriterion) -> 'FilterRequestBuilder':
        self._filters.setdefault(key, []).append(criterion)
        return self

    def global_field_name(self, name: Optional[str]) -> 'FilterRequestBuilder':
        self._global_field_name = name
        return self

    def build(self) -> FilterRequest:
        return FilterRequest(
            offset=self._first,
            page_size=self._rows,
            sort_criteria=tuple(self._sort_fields),
            field_criteria=dict(self._filters),
            global_field_name=self._global_field_name,
        )
