"""
Unit tests for response normalization.
"""

from elastic_query.query_types.primitives import SearchResult
from elastic_query.utils.response_parser import (
    extract_metric_value,
    has_total,
    output_format,
    parse_hits,
    parse_total,
)


class TestOutputFormat:
    """Test cases for output_format."""

    def test_no_hits_is_empty(self):
        result = output_format({"hits": {"total": 0, "hits": []}})

        assert isinstance(result, SearchResult)
        assert result == []
        assert result.total == 0

    def test_records_get_their_id(self):
        response = {
            "hits": {
                "total": 2,
                "hits": [
                    {"_id": "1", "_source": {"x": 1}},
                    {"_id": "2", "_source": {"x": 2}},
                ],
            }
        }

        result = output_format(response)

        assert result == [{"x": 1, "_id": "1"}, {"x": 2, "_id": "2"}]
        assert result.total == 2
        assert result.scroll_id is None

    def test_total_object_and_scroll_id(self):
        response = {
            "_scroll_id": "abc",
            "hits": {
                "total": {"value": 10, "relation": "eq"},
                "hits": [{"_id": "1", "_source": {"x": 1}}],
            },
        }

        result = output_format(response)

        assert result.total == 10
        assert result.scroll_id == "abc"
        assert result.to_dict() == {"records": [{"x": 1, "_id": "1"}], "total": 10, "scroll_id": "abc"}

    def test_source_is_not_mutated(self):
        source = {"x": 1}
        output_format({"hits": {"total": 1, "hits": [{"_id": "1", "_source": source}]}})
        assert source == {"x": 1}

    def test_exhausted_scroll_keeps_cursor(self):
        result = output_format({"_scroll_id": "abc", "hits": {"total": 5, "hits": []}})
        assert result == []
        assert result.scroll_id == "abc"


class TestParsing:
    """Test cases for the smaller parsers."""

    def test_parse_hits_missing(self):
        assert parse_hits({}) == []

    def test_parse_total_shapes(self):
        assert parse_total({"hits": {"total": 3}}) == 3
        assert parse_total({"hits": {"total": {"value": 4}}}) == 4
        assert parse_total({}) == 0

    def test_has_total(self):
        assert has_total({"hits": {"total": 0}}) is True
        assert has_total({"count": 1}) is False
        assert has_total(None) is False

    def test_metric_value(self):
        assert extract_metric_value({"aggregations": {"total": {"value": 9.5}}}, "max") == 9.5

    def test_metric_value_nested_under_metric(self):
        response = {"aggregations": {"total": {"avg": {"value": 2.0}}}}
        assert extract_metric_value(response, "avg") == 2.0

    def test_metric_value_missing(self):
        assert extract_metric_value({}, "sum") is None
