#!/usr/bin/env python3
"""
Predicate compiler.

Turns the field criteria of a FilterRequest into a single predicate tree:

- every field contributes one predicate, its criteria combined with the
  field's group operator (the first operator any criterion names, OR when
  none does);
- the global search field fans each criterion out as an OR across the
  configured global attributes;
- the field predicates are ANDed together.

Compilation is all or nothing: an unknown field, a match mode that does not
suit the field, or a badly shaped value aborts the whole compile.
"""

import logging
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from .exceptions import UnsupportedMatchModeError, ValueShapeError
from .models import FilterCriterion, FilterOperator, FilterRequest, MatchMode
from .predicate import (
    Comparison, Predicate, PredicateOperator, conjunction, disjunction,
)
from .resolver import FieldResolver, FieldValueCategory


_COMPARISONS = {
    MatchMode.EQUALS: PredicateOperator.EQ,
    MatchMode.NOT_EQUALS: PredicateOperator.NE,
    MatchMode.LT: PredicateOperator.LT,
    MatchMode.LTE: PredicateOperator.LTE,
    MatchMode.GT: PredicateOperator.GT,
    MatchMode.GTE: PredicateOperator.GTE,
}

# Match mode -> (operator, pattern template)
_PATTERNS = {
    MatchMode.CONTAINS: (PredicateOperator.LIKE, "%{}%"),
    MatchMode.NOT_CONTAINS: (PredicateOperator.NOT_LIKE, "%{}%"),
    MatchMode.STARTS_WITH: (PredicateOperator.LIKE, "{}%"),
    MatchMode.ENDS_WITH: (PredicateOperator.LIKE, "%{}"),
}

_ORDERED_MODES = set(_COMPARISONS) | {MatchMode.BETWEEN, MatchMode.IN}
_OPAQUE_MODES = {MatchMode.EQUALS, MatchMode.NOT_EQUALS, MatchMode.IN}


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple, set, frozenset))


def group_operator(criteria: Sequence[FilterCriterion]) -> FilterOperator:
    """The first operator named by any criterion, OR if none names one."""
    for criterion in criteria:
        if criterion.operator is not None:
            return criterion.operator
    return FilterOperator.OR


def default_match_mode(category: FieldValueCategory) -> MatchMode:
    """Match mode used when a criterion does not name one."""
    return MatchMode.CONTAINS if category == FieldValueCategory.TEXT else MatchMode.EQUALS


class PredicateCompiler:
    """
    Compiles FilterRequest field criteria into a predicate tree.

    The global attribute set is the only state the compiler holds. It is
    stored as a tuple and replaced as a whole by the setters, so a compile
    that is already running keeps seeing the set it started with.
    """

    def __init__(self, global_attributes: Iterable[str] = ()):
        self.logger = logging.getLogger(__name__)
        self._global_attributes: Tuple[str, ...] = ()
        self.set_global_attributes(global_attributes)

    @property
    def global_attributes(self) -> Tuple[str, ...]:
        return self._global_attributes

    def set_global_attributes(self, attributes: Iterable[str]) -> 'PredicateCompiler':
        # dict keeps the first occurrence order while dropping duplicates
        self._global_attributes = tuple(dict.fromkeys(attributes))
        return self

    def add_global_attribute(self, attribute: str) -> 'PredicateCompiler':
        return self.set_global_attributes(self._global_attributes + (attribute,))

    def clear_global_attributes(self) -> 'PredicateCompiler':
        self._global_attributes = ()
        return self

    def compile(self,
                request: FilterRequest,
                resolver: FieldResolver,
                global_attributes: Optional[Iterable[str]] = None) -> Optional[Predicate]:
        """
        Compile the field criteria of a request.

        Args:
            request: The filter request
            resolver: Resolves field names to value categories
            global_attributes: Attributes searched by the global field,
                defaults to the compiler's configured set

        Returns:
            The predicate, or None when nothing is filtered

        Raises:
            FieldResolutionError: If a field cannot be resolved
            UnsupportedMatchModeError: If a match mode does not suit a field
            ValueShapeError: If a criterion value has the wrong shape
        """
        if not request.field_criteria:
            return None

        if global_attributes is None:
            attributes = self._global_attributes
        else:
            attributes = tuple(dict.fromkeys(global_attributes))

        outer = []
        for field_name, criteria in request.field_criteria.items():
            predicate = self._build_field_predicate(
                resolver, request.global_field_name, attributes, field_name, criteria
            )
            if predicate is not None:
                outer.append(predicate)

        result = conjunction(outer)
        self.logger.debug(f"Compiled {len(request.field_criteria)} filter fields: {result!r}")
        return result

    def _build_field_predicate(self,
                               resolver: FieldResolver,
                               global_field_name: Optional[str],
                               attributes: Tuple[str, ...],
                               field_name: str,
                               criteria: Sequence[FilterCriterion]) -> Optional[Predicate]:
        inner: List[Predicate] = []
        if field_name == global_field_name:
            if not attributes:
                self.logger.warning(
                    f"Ignoring global search field '{field_name}': no global attributes configured"
                )
                return None
            for criterion in criteria:
                inner.append(disjunction(
                    self.build_simple(attr, criterion, resolver) for attr in attributes
                ))
        else:
            for criterion in criteria:
                inner.append(self.build_simple(field_name, criterion, resolver))

        if not inner:
            return None

        if group_operator(criteria) == FilterOperator.AND:
            return conjunction(inner)
        return disjunction(inner)

    def build_simple(self,
                     field_name: str,
                     criterion: FilterCriterion,
                     resolver: FieldResolver) -> Comparison:
        """
        Build the comparison for one criterion on one field.

        Raises:
            FieldResolutionError: If the field cannot be resolved
            UnsupportedMatchModeError: If the match mode does not suit the field
            ValueShapeError: If the value has the wrong shape
        """
        category = resolver.require(field_name)
        match_mode = criterion.match_mode or default_match_mode(category)

        if category == FieldValueCategory.TEXT:
            return self._build_text(field_name, match_mode, criterion.value)
        if category == FieldValueCategory.ORDERED:
            allowed = _ORDERED_MODES
        else:
            allowed = _OPAQUE_MODES
        if match_mode not in allowed:
            raise UnsupportedMatchModeError(field_name, match_mode, category)
        return self._build_plain(field_name, match_mode, criterion.value)

    def _build_text(self, field_name: str, match_mode: MatchMode, value: Any) -> Comparison:
        def lower(item):
            if item is None or _is_sequence(item) or isinstance(item, dict):
                raise ValueShapeError(field_name, match_mode, f"expected a text value, got {item!r}")
            return str(item).lower()

        if match_mode in _PATTERNS:
            operator, template = _PATTERNS[match_mode]
            return Comparison(field_name, operator, (template.format(lower(value)),), True)
        if match_mode in _COMPARISONS:
            return Comparison(field_name, _COMPARISONS[match_mode], (lower(value),), True)
        if match_mode == MatchMode.BETWEEN:
            low, high = self._pair(field_name, match_mode, value)
            return Comparison(field_name, PredicateOperator.BETWEEN, (lower(low), lower(high)), True)
        if match_mode == MatchMode.IN:
            values = self._members(field_name, match_mode, value)
            return Comparison(field_name, PredicateOperator.IN, tuple(lower(v) for v in values), True)
        raise UnsupportedMatchModeError(field_name, match_mode, FieldValueCategory.TEXT)

    def _build_plain(self, field_name: str, match_mode: MatchMode, value: Any) -> Comparison:
        if match_mode == MatchMode.BETWEEN:
            return Comparison(field_name, PredicateOperator.BETWEEN,
                              self._pair(field_name, match_mode, value))
        if match_mode == MatchMode.IN:
            return Comparison(field_name, PredicateOperator.IN,
                              self._members(field_name, match_mode, value))

        if _is_sequence(value):
            raise ValueShapeError(field_name, match_mode, f"expected a single value, got {value!r}")
        if value is None and match_mode not in {MatchMode.EQUALS, MatchMode.NOT_EQUALS}:
            raise ValueShapeError(field_name, match_mode, "a value is required")
        return Comparison(field_name, _COMPARISONS[match_mode], (value,))

    @staticmethod
    def _pair(field_name: str, match_mode: MatchMode, value: Any) -> Tuple[Any, Any]:
        if not isinstance(value, (list, tuple)) or len(value) != 2:
            raise ValueShapeError(field_name, match_mode, f"expected exactly 2 bounds, got {value!r}")
        return value[0], value[1]

    @staticmethod
    def _members(field_name: str, match_mode: MatchMode, value: Any) -> Tuple[Any, ...]:
        if not _is_sequence(value):
            raise ValueShapeError(field_name, match_mode, f"expected a list of values, got {value!r}")
        return tuple(value)
