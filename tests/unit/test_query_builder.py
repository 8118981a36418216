"""
Unit tests for the clause builders.
"""

import pytest

from elastic_query.query_types.primitives import MatchMode
from elastic_query.utils.query_builder import (
    build_between_query,
    build_bool_query,
    build_comparison,
    build_ids_query,
    build_in_group,
    build_match_query,
    build_missing_query,
    build_prefix_query,
    build_query_string,
    build_range_query,
    build_term_query,
    build_wildcard_query,
    resolve_mode,
    translate_like,
    wrap_where,
)


class TestMatchQuery:
    """Test cases for build_match_query."""

    def test_default_searches_all_fields(self):
        assert build_match_query("title", "hello") == {"match": {"_all": "hello"}}

    def test_exact_field(self):
        assert build_match_query("title", "hello", "match") == {"match": {"title": "hello"}}

    def test_phrase_without_slop(self):
        clause = build_match_query("title", "quick fox", MatchMode.PHRASE)
        assert clause == {"match_phrase": {"title": {"query": "quick fox"}}}

    def test_phrase_with_slop(self):
        clause = build_match_query("title", "quick fox", MatchMode.PHRASE, slop=2)
        assert clause["match_phrase"]["title"]["slop"] == 2

    def test_match_all(self):
        assert build_match_query(mode=MatchMode.MATCH_ALL, field="", value="") == {"match_all": {}}

    def test_multi_match(self):
        clause = build_match_query(["title", "content"], "fox", MatchMode.MULTI_MATCH)
        assert clause == {
            "multi_match": {
                "type": "most_fields",
                "fields": ["title", "content"],
                "query": "fox",
            }
        }

    def test_unknown_mode_rejected(self):
        with pytest.raises(ValueError):
            build_match_query("title", "x", "fuzzy")

    def test_builders_are_deterministic(self):
        assert build_match_query("a", "b", "match") == build_match_query("a", "b", "match")
        assert build_match_query("a", "b", "match") is not build_match_query("a", "b", "match")


class TestTermAndRange:
    """Test cases for term and range clauses."""

    def test_scalar_term(self):
        assert build_term_query("status", "active") == {"term": {"status": "active"}}

    def test_list_term_embeds_minimum_match(self):
        clause = build_term_query("tags", ["a", "b"], minimum_match=2)
        assert clause == {"term": {"tags": ["a", "b"], "minimum_match": 2}}

    def test_range_defaults_are_inclusive(self):
        assert build_range_query("age", [10, 20]) == {"range": {"age": {"gte": 10, "lte": 20}}}

    def test_range_custom_operators_and_extra(self):
        clause = build_range_query(
            "created_at",
            ["2024-01-01", "2024-02-01"],
            ("gt", "lt"),
            {"format": "yyyy-MM-dd", "time_zone": "+01:00"},
        )
        assert clause == {
            "range": {
                "created_at": {
                    "gt": "2024-01-01",
                    "lt": "2024-02-01",
                    "format": "yyyy-MM-dd",
                    "time_zone": "+01:00",
                }
            }
        }

    def test_between_is_inclusive(self):
        assert build_between_query("age", [1, 5]) == {
            "range": {"age": {"from": 1, "to": 5, "include_lower": True, "include_upper": True}}
        }

    def test_not_between_is_negated(self):
        clause = build_between_query("age", [1, 5], negate=True)
        assert clause["bool"]["must_not"]["range"]["age"]["to"] == 5


class TestSimpleClauses:
    """Test cases for prefix, wildcard, ids, query_string and missing."""

    def test_prefix(self):
        assert build_prefix_query("name", "jo") == {"prefix": {"name": {"value": "jo"}}}

    def test_like_translation(self):
        assert translate_like("jo_n%") == "jo?n*"

    def test_wildcard(self):
        assert build_wildcard_query("name", "%son") == {"wildcard": {"name": "*son"}}

    def test_ids(self):
        assert build_ids_query(("1", "2")) == {"ids": {"values": ["1", "2"]}}

    def test_query_string_with_fields(self):
        clause = build_query_string("fox AND dog", ["title"])
        assert clause == {"query_string": {"query": "fox AND dog", "fields": ["title"]}}

    def test_query_string_without_fields(self):
        assert "fields" not in build_query_string("fox")["query_string"]

    def test_missing(self):
        assert build_missing_query("deleted_at") == {"missing": {"field": "deleted_at"}}

    def test_missing_negated(self):
        assert build_missing_query("deleted_at", negate=True) == {
            "bool": {"must_not": {"missing": {"field": "deleted_at"}}}
        }


class TestInGroup:
    """Test cases for set membership groups."""

    def test_in_group_ors_phrase_matches(self):
        clause = build_in_group("status", ["a", "b"])
        assert clause == {
            "bool": {
                "should": [
                    {"match": {"status": {"query": "a", "type": "phrase"}}},
                    {"match": {"status": {"query": "b", "type": "phrase"}}},
                ]
            }
        }

    def test_not_in_group_wraps_must_not(self):
        clause = build_in_group("status", ["a"], negate=True)
        assert clause["bool"]["must_not"]["bool"]["should"][0]["match"]["status"]["query"] == "a"


class TestComparison:
    """Test cases for operator dispatch."""

    def test_equals_is_phrase_match(self):
        assert build_comparison("status", "=", "active") == {
            "match": {"status": {"query": "active", "type": "phrase"}}
        }

    @pytest.mark.parametrize("operator", ["!=", "<>"])
    def test_not_equals_is_negated(self, operator):
        clause = build_comparison("status", operator, "active")
        assert clause == {"bool": {"must_not": {"match": {"status": {"query": "active", "type": "phrase"}}}}}

    def test_greater_than_excludes_lower_bound(self):
        assert build_comparison("age", ">", 5) == {
            "range": {"age": {"from": 5, "to": None, "include_lower": False, "include_upper": True}}
        }

    def test_greater_or_equal_includes_lower_bound(self):
        assert build_comparison("age", ">=", 5)["range"]["age"]["include_lower"] is True

    def test_less_than_excludes_upper_bound(self):
        assert build_comparison("age", "<", 5) == {
            "range": {"age": {"from": None, "to": 5, "include_lower": True, "include_upper": False}}
        }

    def test_less_or_equal_includes_upper_bound(self):
        assert build_comparison("age", "<=", 5)["range"]["age"]["include_upper"] is True

    def test_like(self):
        assert build_comparison("name", "like", "jo%") == {"wildcard": {"name": "jo*"}}

    def test_unknown_operator(self):
        with pytest.raises(ValueError, match="Unsupported operator"):
            build_comparison("age", "~", 5)


class TestWrapping:
    """Test cases for boolean placement."""

    def test_resolve_mode(self):
        assert resolve_mode("and") == "must"
        assert resolve_mode("or") == "should"

    def test_wrap_where_and(self):
        fragment = wrap_where({"term": {"a": 1}})
        assert fragment == {"query": {"bool": {"must": {"bool": {"must": [{"term": {"a": 1}}]}}}}}

    def test_wrap_where_or(self):
        fragment = wrap_where({"term": {"a": 1}}, "or")
        assert fragment["query"]["bool"]["must"]["bool"]["should"] == [{"term": {"a": 1}}]

    def test_bool_query_omits_empty_slots(self):
        assert build_bool_query(must=[{"match_all": {}}]) == {"bool": {"must": [{"match_all": {}}]}}
