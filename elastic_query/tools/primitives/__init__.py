"""
Primitive tools for low-level Elasticsearch operations.
"""

from .search import (
    execute_search,
    scroll_search,
    clear_scroll,
    count_documents,
    get_document,
    multi_get,
)
from .write import (
    create_document,
    index_document,
    update_document,
    update_by_query,
    delete_document,
    delete_by_query,
    bulk_write,
)
from .admin import (
    get_index_stats,
    validate_query,
    create_index,
    put_mapping,
    delete_index,
    put_alias,
    alias_exists,
    delete_alias,
    swap_alias,
    put_template,
    delete_template,
)

__all__ = [
    # Read operations
    "execute_search",
    "scroll_search",
    "clear_scroll",
    "count_documents",
    "get_document",
    "multi_get",
    # Write operations
    "create_document",
    "index_document",
    "update_document",
    "update_by_query",
    "delete_document",
    "delete_by_query",
    "bulk_write",
    # Index administration
    "get_index_stats",
    "validate_query",
    "create_index",
    "put_mapping",
    "delete_index",
    "put_alias",
    "alias_exists",
    "delete_alias",
    "swap_alias",
    "put_template",
    "delete_template",
]
