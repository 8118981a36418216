"""
Type definitions for the query builder.
"""

from .primitives import (
    AggregationSpec,
    BulkAction,
    MatchMode,
    Metric,
    RangeSpec,
    ScrollPhase,
    ScrollState,
    SearchRequest,
    SearchResult,
    SortOrder,
)

__all__ = [
    "AggregationSpec",
    "BulkAction",
    "MatchMode",
    "Metric",
    "RangeSpec",
    "ScrollPhase",
    "ScrollState",
    "SearchRequest",
    "SearchResult",
    "SortOrder",
]
