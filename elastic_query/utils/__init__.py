"""
Utility functions for the query builder.
"""

from .connection import (
    ClientContext,
    build_elasticsearch_client,
    check_connection,
    get_default_context,
    set_default_context,
)
from .validation import (
    validate_index_pattern,
    validate_field_name,
    validate_size,
    clamp_value,
)
from .merge import merge_where
from .query_builder import (
    build_match_query,
    build_phrase_match,
    build_term_query,
    build_terms_query,
    build_range_query,
    build_prefix_query,
    build_wildcard_query,
    translate_like,
    build_ids_query,
    build_query_string,
    build_missing_query,
    build_in_group,
    build_between_query,
    build_comparison,
    build_bool_query,
    wrap_where,
)
from .request_builder import (
    filter_fields,
    build_sort,
    build_search_body,
    build_assignment_script,
    build_counter_script,
    build_bulk_operations,
    build_mget_docs,
)
from .response_parser import (
    parse_hits,
    parse_total,
    parse_aggregations,
    extract_metric_value,
    output_format,
)

__all__ = [
    # Connection
    "ClientContext",
    "build_elasticsearch_client",
    "check_connection",
    "get_default_context",
    "set_default_context",
    # Validation
    "validate_index_pattern",
    "validate_field_name",
    "validate_size",
    "clamp_value",
    # Where-tree merge
    "merge_where",
    # Clause building
    "build_match_query",
    "build_phrase_match",
    "build_term_query",
    "build_terms_query",
    "build_range_query",
    "build_prefix_query",
    "build_wildcard_query",
    "translate_like",
    "build_ids_query",
    "build_query_string",
    "build_missing_query",
    "build_in_group",
    "build_between_query",
    "build_comparison",
    "build_bool_query",
    "wrap_where",
    # Request assembly
    "filter_fields",
    "build_sort",
    "build_search_body",
    "build_assignment_script",
    "build_counter_script",
    "build_bulk_operations",
    "build_mget_docs",
    # Response parsing
    "parse_hits",
    "parse_total",
    "parse_aggregations",
    "extract_metric_value",
    "output_format",
]
