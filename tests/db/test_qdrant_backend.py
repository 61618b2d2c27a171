#!/usr/bin/env python3
"""
Tests for lowering predicates to Qdrant filters.
"""

from datetime import datetime

import pytest
from qdrant_client.models import (
    DatetimeRange, FieldCondition, Filter, IsNullCondition, MatchAny,
    MatchText, MatchValue, Range,
)

from uifilter import Comparison, Junction, PredicateOperator, UnsupportedOperatorError
from uifilter.db.filters import QdrantFilterBackend


class TestQdrantFilterBackend:
    """Test Qdrant filter generation."""

    def test_no_predicate(self):
        assert QdrantFilterBackend().convert(None) is None

    def test_equality(self):
        result = QdrantFilterBackend().convert(Comparison("role", PredicateOperator.EQ, ("hero",)))
        assert result == Filter(must=[FieldCondition(key="role", match=MatchValue(value="hero"))])

    def test_not_equal(self):
        result = QdrantFilterBackend().convert(Comparison("role", PredicateOperator.NE, ("hero",)))
        assert result == Filter(must_not=[FieldCondition(key="role", match=MatchValue(value="hero"))])

    def test_float_equality_uses_range(self):
        result = QdrantFilterBackend().convert(Comparison("rating", PredicateOperator.EQ, (4.5,)))
        assert result.must[0].range == Range(gte=4.5, lte=4.5)

    def test_null_equality(self):
        result = QdrantFilterBackend().convert(Comparison("age", PredicateOperator.EQ, (None,)))
        assert isinstance(result.must[0], IsNullCondition)

    def test_in(self):
        result = QdrantFilterBackend().convert(Comparison("age", PredicateOperator.IN, (1, 2)))
        assert result.must[0] == FieldCondition(key="age", match=MatchAny(any=[1, 2]))

    def test_ranges(self):
        backend = QdrantFilterBackend()
        assert backend.convert(Comparison("age", PredicateOperator.GTE, (18,))).must[0].range == Range(gte=18)
        assert backend.convert(Comparison("age", PredicateOperator.BETWEEN, (18, 30))).must[0].range == \
            Range(gte=18, lte=30)

    def test_datetime_range(self):
        when = datetime(2024, 1, 1)
        result = QdrantFilterBackend().convert(Comparison("created", PredicateOperator.GT, (when,)))
        assert isinstance(result.must[0].range, DatetimeRange)

    def test_contains_uses_full_text_match(self):
        result = QdrantFilterBackend().convert(Comparison("name", PredicateOperator.LIKE, ("%bolt%",), True))
        assert result.must[0] == FieldCondition(key="name", match=MatchText(text="bolt"))

    def test_not_contains(self):
        result = QdrantFilterBackend().convert(
            Comparison("name", PredicateOperator.NOT_LIKE, ("%bolt%",), True)
        )
        assert result == Filter(must_not=[FieldCondition(key="name", match=MatchText(text="bolt"))])

    @pytest.mark.parametrize("pattern", ["bolt%", "%bolt"])
    def test_prefix_and_suffix_are_unsupported(self, pattern):
        with pytest.raises(UnsupportedOperatorError):
            QdrantFilterBackend().convert(Comparison("name", PredicateOperator.LIKE, (pattern,), True))

    def test_text_ranges_are_unsupported(self):
        with pytest.raises(UnsupportedOperatorError):
            QdrantFilterBackend().convert(Comparison("name", PredicateOperator.LT, ("m",), True))

    def test_junctions(self):
        predicate = Junction(PredicateOperator.AND, (
            Junction(PredicateOperator.OR, (
                Comparison("name", PredicateOperator.LIKE, ("%bolt%",), True),
                Comparison("power", PredicateOperator.LIKE, ("%bolt%",), True),
            )),
            Comparison("role", PredicateOperator.NE, ("villain",)),
        ))

        result = QdrantFilterBackend(payload_prefix="metadata").convert(predicate)

        assert result.must == [Filter(should=[
            FieldCondition(key="metadata.name", match=MatchText(text="bolt")),
            FieldCondition(key="metadata.power", match=MatchText(text="bolt")),
        ])]
        assert result.must_not == [FieldCondition(key="metadata.role", match=MatchValue(value="villain"))]
