#!/usr/bin/env python3
"""
Backend-neutral predicate tree.

The compiler produces Comparison leaves joined by AND/OR Junctions. Query
backends implement PredicateBackend to lower the tree into their native
query form (SQL WHERE clauses, Qdrant filters, ...).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional, Tuple, Union

from .exceptions import UnsupportedOperatorError


class PredicateOperator(Enum):
    """Operators that can appear in a predicate tree."""
    # Comparison
    EQ = "eq"
    NE = "ne"
    LT = "lt"
    LTE = "lte"
    GT = "gt"
    GTE = "gte"

    # Range / membership
    BETWEEN = "between"
    IN = "in"

    # Pattern, '%' is the wildcard
    LIKE = "like"
    NOT_LIKE = "not_like"

    # Logical
    AND = "and"
    OR = "or"

    @property
    def is_logical(self) -> bool:
        return self in {PredicateOperator.AND, PredicateOperator.OR}


@dataclass(frozen=True)
class Comparison:
    """
    A single comparison against a field.

    Attributes:
        field: Field being compared
        operator: Comparison operator
        operands: Literal operands; one for most operators, two for BETWEEN,
            any number for IN
        case_insensitive: The field value is lower-cased before comparing.
            Operands are already lower-cased.
    """
    field: str
    operator: PredicateOperator
    operands: Tuple[Any, ...]
    case_insensitive: bool = False

    @property
    def operand(self) -> Any:
        """The single operand of a unary comparison."""
        return self.operands[0]

    def __repr__(self):
        target = f"lower({self.field})" if self.case_insensitive else self.field
        if self.operator == PredicateOperator.IN:
            return f"{target} in {list(self.operands)}"
        if self.operator == PredicateOperator.BETWEEN:
            return f"{target} between {self.operands[0]!r} and {self.operands[1]!r}"
        return f"{target} {self.operator.value} {self.operand!r}"


@dataclass(frozen=True)
class Junction:
    """
    AND / OR over child predicates.
    """
    operator: PredicateOperator
    conditions: Tuple[Union[Comparison, 'Junction'], ...]

    def __post_init__(self):
        if not self.operator.is_logical:
            raise ValueError(f"Not a logical operator: {self.operator.value}")
        object.__setattr__(self, 'conditions', tuple(self.conditions))

    def __repr__(self):
        return f"{self.operator.value}({list(self.conditions)})"


Predicate = Union[Comparison, Junction]


def _combine(operator: PredicateOperator, parts: Iterable[Predicate]) -> Optional[Predicate]:
    parts = tuple(parts)
    if not parts:
        return None
    if len(parts) == 1:
        return parts[0]
    return Junction(operator, parts)


def conjunction(parts: Iterable[Predicate]) -> Optional[Predicate]:
    """AND the parts together. A single part is returned as is, no parts gives None."""
    return _combine(PredicateOperator.AND, parts)


def disjunction(parts: Iterable[Predicate]) -> Optional[Predicate]:
    """OR the parts together. A single part is returned as is, no parts gives None."""
    return _combine(PredicateOperator.OR, parts)


def iter_comparisons(predicate: Optional[Predicate]):
    """Yield every Comparison leaf of a predicate, depth first."""
    if predicate is None:
        return
    if isinstance(predicate, Comparison):
        yield predicate
    else:
        for condition in predicate.conditions:
            yield from iter_comparisons(condition)


class PredicateBackend(ABC):
    """
    Abstract base class for predicate backends.
    Each database/search engine implements this to convert
    predicate trees into their native query format.
    """

    name = "backend"

    @abstractmethod
    def convert(self, predicate: Optional[Predicate]) -> Any:
        """
        Convert a predicate tree to the backend's native format.

        Args:
            predicate: The predicate tree, None matches everything

        Returns:
            Backend-specific query object
        """
        pass

    @abstractmethod
    def supports_operator(self, operator: PredicateOperator) -> bool:
        """
        Check if this backend supports a specific operator.

        Args:
            operator: The operator to check

        Returns:
            True if supported, False otherwise
        """
        pass

    def validate_predicate(self, predicate: Optional[Predicate]) -> None:
        """
        Validate that all operators in the predicate are supported.

        Raises:
            UnsupportedOperatorError: If an unsupported operator is found
        """
        if predicate is None:
            return
        if not self.supports_operator(predicate.operator):
            raise UnsupportedOperatorError(predicate.operator, self.name)
        if isinstance(predicate, Junction):
            for condition in predicate.conditions:
                self.validate_predicate(condition)
