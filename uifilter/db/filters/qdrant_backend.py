#!/usr/bin/env python3
"""
Qdrant backend for compiled predicates.
Converts predicate trees to Qdrant Filter objects.

Qdrant cannot lower-case a payload value at query time, so case-insensitive
equality and membership assume the payload holds lower-cased text, and
substring matches rely on a full-text index on the field. Case-insensitive
range comparisons and prefix/suffix patterns have no Qdrant equivalent.
"""

from datetime import date
from typing import Any, List, Optional, Union

from qdrant_client.models import (
    DatetimeRange, FieldCondition, Filter, IsNullCondition, MatchAny,
    MatchText, MatchValue, PayloadField, Range,
)

from ...exceptions import UnsupportedOperatorError
from ...predicate import (
    Comparison, Junction, Predicate, PredicateBackend, PredicateOperator,
)


Condition = Union[FieldCondition, IsNullCondition, Filter]

_RANGE_KEYS = {
    PredicateOperator.GT: 'gt',
    PredicateOperator.GTE: 'gte',
    PredicateOperator.LT: 'lt',
    PredicateOperator.LTE: 'lte',
}


class QdrantFilterBackend(PredicateBackend):
    """
    Converts predicate trees to Qdrant Filter objects.
    """

    name = "Qdrant"

    SUPPORTED_OPERATORS = {
        PredicateOperator.EQ, PredicateOperator.NE,
        PredicateOperator.GT, PredicateOperator.GTE,
        PredicateOperator.LT, PredicateOperator.LTE,
        PredicateOperator.IN, PredicateOperator.BETWEEN,
        PredicateOperator.LIKE, PredicateOperator.NOT_LIKE,
        PredicateOperator.AND, PredicateOperator.OR,
    }

    def __init__(self, payload_prefix: Optional[str] = None):
        """
        Initialize Qdrant backend.

        Args:
            payload_prefix: Prefix for payload keys, e.g. 'metadata'
        """
        self.payload_prefix = payload_prefix

    def convert(self, predicate: Optional[Predicate]) -> Optional[Filter]:
        """
        Convert a predicate to a Qdrant Filter.

        Args:
            predicate: The predicate tree

        Returns:
            Qdrant Filter, or None when every point matches
        """
        if predicate is None:
            return None

        self.validate_predicate(predicate)

        result = self._convert_predicate(predicate)
        if isinstance(result, Filter):
            return result
        return Filter(must=[result])

    def supports_operator(self, operator: PredicateOperator) -> bool:
        return operator in self.SUPPORTED_OPERATORS

    def _convert_predicate(self, predicate: Predicate) -> Condition:
        if isinstance(predicate, Comparison):
            return self._convert_comparison(predicate)
        elif isinstance(predicate, Junction):
            return self._convert_junction(predicate)
        else:
            raise ValueError(f"Unknown predicate type: {type(predicate)}")

    def _convert_junction(self, junction: Junction) -> Filter:
        children = [self._convert_predicate(c) for c in junction.conditions]

        if junction.operator == PredicateOperator.OR:
            return Filter(should=children)

        must: List[Condition] = []
        must_not: List[Condition] = []
        for child in children:
            # Pure negations fold into this level's must_not
            if isinstance(child, Filter) and child.must_not and not child.must and not child.should:
                must_not.extend(child.must_not)
            else:
                must.append(child)
        return Filter(must=must or None, must_not=must_not or None)

    def _convert_comparison(self, comparison: Comparison) -> Condition:
        key = self._get_field_key(comparison.field)
        op = comparison.operator

        if op == PredicateOperator.EQ:
            return self._build_equality(key, comparison.operand)

        elif op == PredicateOperator.NE:
            return Filter(must_not=[self._build_equality(key, comparison.operand)])

        elif op == PredicateOperator.IN:
            return FieldCondition(key=key, match=MatchAny(any=list(comparison.operands)))

        elif op in _RANGE_KEYS:
            if comparison.case_insensitive:
                raise UnsupportedOperatorError(op, f"{self.name} (text ranges)")
            return self._build_range(key, **{_RANGE_KEYS[op]: comparison.operand})

        elif op == PredicateOperator.BETWEEN:
            if comparison.case_insensitive:
                raise UnsupportedOperatorError(op, f"{self.name} (text ranges)")
            low, high = comparison.operands
            return self._build_range(key, gte=low, lte=high)

        elif op == PredicateOperator.LIKE:
            return FieldCondition(key=key, match=MatchText(text=self._substring(comparison)))

        elif op == PredicateOperator.NOT_LIKE:
            text = self._substring(comparison)
            return Filter(must_not=[FieldCondition(key=key, match=MatchText(text=text))])

        else:
            raise UnsupportedOperatorError(op, self.name)

    def _build_equality(self, key: str, value: Any) -> Condition:
        if value is None:
            return IsNullCondition(is_null=PayloadField(key=key))
        if isinstance(value, float):
            # MatchValue only takes keywords, integers and booleans
            return FieldCondition(key=key, range=Range(gte=value, lte=value))
        return FieldCondition(key=key, match=MatchValue(value=value))

    @staticmethod
    def _build_range(key: str, **bounds: Any) -> FieldCondition:
        if any(isinstance(bound, date) for bound in bounds.values()):
            return FieldCondition(key=key, range=DatetimeRange(**bounds))
        return FieldCondition(key=key, range=Range(**bounds))

    def _substring(self, comparison: Comparison) -> str:
        pattern = comparison.operand
        if len(pattern) < 2 or not (pattern.startswith('%') and pattern.endswith('%')):
            raise UnsupportedOperatorError(comparison.operator, f"{self.name} (prefix/suffix patterns)")
        return pattern[1:-1]

    def _get_field_key(self, field: str) -> str:
        if self.payload_prefix:
            return f"{self.payload_prefix}.{field}"
        return field
