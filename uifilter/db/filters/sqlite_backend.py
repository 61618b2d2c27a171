#!/usr/bin/env python3
"""
SQLite backend for compiled predicates.
Converts predicate trees to SQLite WHERE clauses, and sort specs and page
windows to ORDER BY / LIMIT clauses.
"""

from typing import Any, Iterable, List, Optional, Tuple

from ...pagination import PageWindow
from ...predicate import (
    Comparison, Junction, Predicate, PredicateBackend, PredicateOperator,
)
from ...sort import SortSpec
from ...exceptions import UnsupportedOperatorError


class SQLiteFilterBackend(PredicateBackend):
    """
    Converts predicate trees to SQLite WHERE clauses.

    Fields are double-quoted column references. When a metadata column is
    configured, fields outside ``direct_fields`` are read from that JSON
    column with json_extract.
    """

    name = "SQLite"

    SUPPORTED_OPERATORS = {
        PredicateOperator.EQ, PredicateOperator.NE,
        PredicateOperator.GT, PredicateOperator.GTE,
        PredicateOperator.LT, PredicateOperator.LTE,
        PredicateOperator.IN, PredicateOperator.BETWEEN,
        PredicateOperator.LIKE, PredicateOperator.NOT_LIKE,
        PredicateOperator.AND, PredicateOperator.OR,
    }

    _SQL_OPERATORS = {
        PredicateOperator.EQ: "=",
        PredicateOperator.NE: "!=",
        PredicateOperator.GT: ">",
        PredicateOperator.GTE: ">=",
        PredicateOperator.LT: "<",
        PredicateOperator.LTE: "<=",
    }

    def __init__(self,
                 table_alias: Optional[str] = None,
                 metadata_column: Optional[str] = None,
                 direct_fields: Optional[Iterable[str]] = None):
        """
        Initialize SQLite backend.

        Args:
            table_alias: Table alias to use in generated SQL
            metadata_column: JSON column holding fields that are not columns
            direct_fields: Fields stored as real columns when metadata_column is set
        """
        self.table_alias = table_alias
        self.metadata_column = metadata_column
        self.direct_fields = set(direct_fields or ())
        self.params: List[Any] = []

    def convert(self, predicate: Optional[Predicate]) -> Tuple[str, List[Any]]:
        """
        Convert a predicate to a SQLite WHERE clause.

        Args:
            predicate: The predicate tree

        Returns:
            Tuple of (where_clause, params)
        """
        self.params = []

        # No predicate matches everything
        if predicate is None:
            return "1=1", []

        self.validate_predicate(predicate)

        sql = self._convert_predicate(predicate)
        return sql, self.params

    def supports_operator(self, operator: PredicateOperator) -> bool:
        return operator in self.SUPPORTED_OPERATORS

    def order_by(self, sort: SortSpec) -> str:
        """
        Build an ORDER BY clause, or an empty string for an unsorted spec.
        """
        if sort.is_unsorted:
            return ""
        keys = [
            f"{self._get_field_reference(order.field)} {'ASC' if order.ascending else 'DESC'}"
            for order in sort
        ]
        return "ORDER BY " + ", ".join(keys)

    def limit(self, page: Optional[PageWindow]) -> Tuple[str, List[int]]:
        """
        Build a LIMIT/OFFSET clause, or an empty one when there is no page.
        """
        if page is None:
            return "", []
        return "LIMIT ? OFFSET ?", [page.size, page.offset]

    def _convert_predicate(self, predicate: Predicate) -> str:
        if isinstance(predicate, Comparison):
            return self._convert_comparison(predicate)
        elif isinstance(predicate, Junction):
            return self._convert_junction(predicate)
        else:
            raise ValueError(f"Unknown predicate type: {type(predicate)}")

    def _convert_junction(self, junction: Junction) -> str:
        if junction.operator == PredicateOperator.AND:
            if not junction.conditions:
                return "1=1"
            parts = [self._convert_predicate(c) for c in junction.conditions]
            return f"({' AND '.join(parts)})"
        else:
            if not junction.conditions:
                return "0=1"
            parts = [self._convert_predicate(c) for c in junction.conditions]
            return f"({' OR '.join(parts)})"

    def _convert_comparison(self, comparison: Comparison) -> str:
        field_ref = self._get_field_reference(comparison.field)
        if comparison.case_insensitive:
            field_ref = f"lower({field_ref})"
        op = comparison.operator

        if op in self._SQL_OPERATORS:
            return self._build_comparison(field_ref, op, comparison.operand)

        elif op == PredicateOperator.IN:
            return self._build_in(field_ref, comparison.operands)

        elif op == PredicateOperator.BETWEEN:
            low, high = comparison.operands
            self.params.extend([low, high])
            return f"{field_ref} BETWEEN ? AND ?"

        elif op == PredicateOperator.LIKE:
            self.params.append(comparison.operand)
            return f"{field_ref} LIKE ?"

        elif op == PredicateOperator.NOT_LIKE:
            self.params.append(comparison.operand)
            return f"{field_ref} NOT LIKE ?"

        else:
            raise UnsupportedOperatorError(op, self.name)

    def _build_comparison(self, field_ref: str, op: PredicateOperator, value: Any) -> str:
        if value is None and op in {PredicateOperator.EQ, PredicateOperator.NE}:
            return f"{field_ref} {'IS NOT' if op == PredicateOperator.NE else 'IS'} NULL"
        self.params.append(value)
        return f"{field_ref} {self._SQL_OPERATORS[op]} ?"

    def _build_in(self, field_ref: str, values: Tuple[Any, ...]) -> str:
        if not values:
            return "0=1"
        placeholders = ','.join(['?' for _ in values])
        self.params.extend(values)
        return f"{field_ref} IN ({placeholders})"

    def _get_field_reference(self, field: str) -> str:
        """
        Get SQL reference for a field.
        Returns either a quoted column reference or a JSON extract.
        """
        if self.metadata_column and field not in self.direct_fields:
            json_path = '$.' + field.replace("'", "''")
            return f"json_extract({self._qualify(self.metadata_column)}, '{json_path}')"
        return self._qualify(field)

    def _qualify(self, column: str) -> str:
        quoted = quote_identifier(column)
        return f"{self.table_alias}.{quoted}" if self.table_alias else quoted


def quote_identifier(name: str) -> str:
    """Quote an SQLite identifier."""
    return '"' + name.replace('"', '""') + '"'
