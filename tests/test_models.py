#!/usr/bin/env python3
"""
Tests for the filter request model.
"""

import pytest

from uifilter import (
    FilterCriterion, FilterOperator, FilterRequest, InvalidFilterError,
    MatchMode, SortCriterion,
)


class TestFilterRequestBuilder:
    """Test building requests in code."""

    def test_builder_groups_criteria_by_key(self):
        """Repeated keys append to the same list, in order."""
        request = (FilterRequest.builder()
                   .first(10)
                   .add_sort_field("foo", 1)
                   .add_sort_field("bar", -1)
                   .add_filter("state", FilterCriterion("Massachusetts"))
                   .add_filter("state", FilterCriterion("Connecticut"))
                   .add_filter("state", FilterCriterion("Rhode Island"))
                   .add_filter("age", FilterCriterion(21, MatchMode.LT))
                   .add_filter("name", FilterCriterion("James", MatchMode.STARTS_WITH, FilterOperator.AND))
                   .add_filter("name", FilterCriterion("Morrison", MatchMode.ENDS_WITH, FilterOperator.AND))
                   .build())

        assert request.offset == 10
        assert request.page_size == 0
        assert [s.field for s in request.sort_criteria] == ["foo", "bar"]
        assert list(request.field_criteria) == ["state", "age", "name"]
        assert [c.value for c in request.field_criteria["state"]] == [
            "Massachusetts", "Connecticut", "Rhode Island"
        ]
        assert request.field_criteria["age"][0].value == 21
        assert request.field_criteria["age"][0].match_mode == MatchMode.LT
        assert [c.value for c in request.field_criteria["name"]] == ["James", "Morrison"]

    def test_defaults(self):
        request = FilterRequest()
        assert request.offset == 0
        assert request.page_size == 0
        assert request.sort_criteria == ()
        assert request.field_criteria == {}
        assert request.global_field_name is None


class TestFilterRequestValidation:
    """Test request shape validation."""

    def test_none_offset_and_page_size_read_as_zero(self):
        request = FilterRequest(offset=None, page_size=None)
        assert request.offset == 0
        assert request.page_size == 0

    @pytest.mark.parametrize("kwargs", [
        {"offset": -1},
        {"page_size": -5},
        {"offset": "10"},
        {"page_size": True},
    ])
    def test_rejects_bad_window(self, kwargs):
        with pytest.raises(InvalidFilterError):
            FilterRequest(**kwargs)

    def test_empty_criteria_list_is_dropped(self):
        request = FilterRequest(field_criteria={"name": [], "age": [FilterCriterion(3)]})
        assert list(request.field_criteria) == ["age"]

    def test_criteria_are_stored_as_tuples(self):
        request = FilterRequest(field_criteria={"age": [FilterCriterion(3)]})
        assert isinstance(request.field_criteria["age"], tuple)

    def test_rejects_non_string_keys(self):
        with pytest.raises(InvalidFilterError):
            FilterRequest(field_criteria={1: [FilterCriterion(3)]})

    def test_rejects_foreign_criteria(self):
        with pytest.raises(InvalidFilterError):
            FilterRequest(field_criteria={"age": [{"value": 3}]})

    def test_rejects_blank_sort_field(self):
        with pytest.raises(InvalidFilterError):
            SortCriterion("")

    def test_field_criteria_are_read_only(self):
        request = FilterRequest(field_criteria={"age": [FilterCriterion(3)]})
        with pytest.raises(TypeError):
            request.field_criteria["name"] = (FilterCriterion("bolt"),)
        with pytest.raises(TypeError):
            del request.field_criteria["age"]
        assert list(request.field_criteria) == ["age"]

    def test_caller_dict_does_not_leak_in(self):
        criteria = {"age": [FilterCriterion(3)]}
        request = FilterRequest(field_criteria=criteria)
        criteria["name"] = [FilterCriterion("bolt")]
        assert list(request.field_criteria) == ["age"]

    def test_requests_are_hashable(self):
        first = FilterRequest.from_dict({"rows": 5, "filters": {"age": [{"value": [1, 2], "matchMode": "in"}]}})
        second = FilterRequest.from_dict({"rows": 5, "filters": {"age": [{"value": [1, 2], "matchMode": "in"}]}})
        assert first == second
        assert hash(first) == hash(second)
        assert len({first, second}) == 1

    def test_list_values_are_frozen(self):
        criterion = FilterCriterion(["a", "b"], "in")
        assert criterion.value == ("a", "b")


class TestMatchMode:
    """Test match mode names and aliases."""

    def test_from_string(self):
        assert MatchMode.from_string("startsWith") == MatchMode.STARTS_WITH
        assert MatchMode.from_string("in") == MatchMode.IN
        assert MatchMode.from_string(None) is None

    @pytest.mark.parametrize("alias,expected", [
        ("after", MatchMode.GT),
        ("dateAfter", MatchMode.GT),
        ("before", MatchMode.LT),
        ("dateBefore", MatchMode.LT),
        ("is", MatchMode.EQUALS),
        ("dateIs", MatchMode.EQUALS),
        ("isNot", MatchMode.NOT_EQUALS),
        ("dateIsNot", MatchMode.NOT_EQUALS),
    ])
    def test_date_aliases(self, alias, expected):
        assert MatchMode.from_string(alias) == expected
        assert MatchMode.is_valid(alias)

    def test_unknown_match_mode(self):
        with pytest.raises(InvalidFilterError, match="Unknown match mode"):
            FilterCriterion("x", "fuzzy")

    @pytest.mark.parametrize("payload", [
        {"value": 3, "matchMode": ["lt"]},
        {"value": 3, "matchMode": {"mode": "lt"}},
        {"value": 3, "operator": ["and"]},
    ])
    def test_non_string_names_are_rejected(self, payload):
        with pytest.raises(InvalidFilterError, match="must be a string"):
            FilterRequest.from_dict({"filters": {"age": [payload]}})

    def test_is_valid_rejects_non_strings(self):
        assert not MatchMode.is_valid(["lt"])
        assert not MatchMode.is_valid(None)

    def test_unknown_operator(self):
        with pytest.raises(InvalidFilterError, match="Unknown filter operator"):
            FilterCriterion("x", None, "xor")


class TestFromDict:
    """Test decoding the JSON wire shape."""

    def test_full_payload(self):
        request = FilterRequest.from_dict({
            "first": 20,
            "rows": 10,
            "sortFields": [{"field": "name", "order": -1}],
            "filters": {
                "name": [{"value": "james", "matchMode": "startsWith", "operator": "and"}],
                "age": [{"value": [18, 30], "matchMode": "between"}],
            },
            "globalFieldName": "global",
        })

        assert request.offset == 20
        assert request.page_size == 10
        assert request.sort_criteria == (SortCriterion("name", -1),)
        assert request.field_criteria["name"] == (
            FilterCriterion("james", MatchMode.STARTS_WITH, FilterOperator.AND),
        )
        assert request.field_criteria["age"][0].value == (18, 30)
        assert request.global_field_name == "global"

    def test_unknown_keys_are_ignored(self):
        request = FilterRequest.from_dict({
            "first": 0,
            "rows": 5,
            "somethingNew": {"nested": True},
            "sortFields": [{"field": "id", "order": 1, "nullsFirst": True}],
            "filters": {"id": [{"value": 3, "matchMode": "equals", "caseSensitive": False}]},
        })
        assert request.page_size == 5
        assert request.sort_criteria == (SortCriterion("id", 1),)
        assert request.field_criteria["id"] == (FilterCriterion(3, MatchMode.EQUALS),)

    def test_single_criterion_object(self):
        request = FilterRequest.from_dict({"filters": {"name": {"value": "bolt"}}})
        assert request.field_criteria["name"] == (FilterCriterion("bolt"),)

    def test_missing_window_defaults(self):
        request = FilterRequest.from_dict({})
        assert request.offset == 0
        assert request.page_size == 0

    def test_rejects_non_object(self):
        with pytest.raises(InvalidFilterError):
            FilterRequest.from_dict(["not", "an", "object"])

    def test_rejects_bad_filters(self):
        with pytest.raises(InvalidFilterError):
            FilterRequest.from_dict({"filters": {"name": "bolt"}})

    def test_to_dict_matches_wire_shape(self):
        payload = {
            "first": 20,
            "rows": 10,
            "sortFields": [{"field": "name", "order": -1}],
            "filters": {"age": [{"value": [18, 30], "matchMode": "between", "operator": None}]},
            "globalFieldName": None,
        }
        assert FilterRequest.from_dict(payload).to_dict() == payload


class TestFromLazyLoadEvent:
    """Test converting PrimeNG table lazy-load events."""

    def test_rows_and_multi_sort(self):
        request = FilterRequest.from_lazy_load_event({
            "first": 30,
            "rows": 15,
            "multiSortMeta": [{"field": "state", "order": 1}, {"field": "age", "order": -1}],
        })
        assert request.offset == 30
        assert request.page_size == 15
        assert request.sort_criteria == (SortCriterion("state", 1), SortCriterion("age", -1))
        assert request.global_field_name is None

    def test_rows_from_last(self):
        assert FilterRequest.from_lazy_load_event({"first": 10, "last": 30}).page_size == 20
        assert FilterRequest.from_lazy_load_event({"last": 25}).page_size == 25
        assert FilterRequest.from_lazy_load_event({}).page_size == 0

    def test_single_sort_field(self):
        request = FilterRequest.from_lazy_load_event({"sortField": ["name", "id"], "sortOrder": -1})
        assert request.sort_criteria == (SortCriterion("name", -1),)

    def test_filters(self):
        request = FilterRequest.from_lazy_load_event({
            "filters": {
                "global": {"value": "bolt", "matchMode": "contains"},
                "name": [
                    {"value": "ja", "matchMode": "startsWith", "operator": "and"},
                    {"value": None, "matchMode": "endsWith", "operator": "and"},
                ],
                "created": [{"value": "2024-01-01", "matchMode": "dateAfter", "operator": "and"}],
                "age": [{"value": None, "matchMode": "equals"}],
                "state": None,
            },
        })

        assert request.global_field_name == "global"
        assert list(request.field_criteria) == ["global", "name", "created"]
        assert request.field_criteria["name"] == (
            FilterCriterion("ja", MatchMode.STARTS_WITH, FilterOperator.AND),
        )
        assert request.field_criteria["created"][0].match_mode == MatchMode.GT
