"""
Fluent query builder for Elasticsearch.
"""

from .exceptions import ClientError, ConfigurationError, NotFound, QueryError
from .query import Query
from .query_types import MatchMode, ScrollPhase, SearchResult, SortOrder
from .utils.connection import ClientContext, get_default_context, set_default_context

__version__ = "1.0.0"

__all__ = [
    "Query",
    "ClientContext",
    "get_default_context",
    "set_default_context",
    "MatchMode",
    "ScrollPhase",
    "SearchResult",
    "SortOrder",
    "QueryError",
    "NotFound",
    "ClientError",
    "ConfigurationError",
]
