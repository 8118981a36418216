"""
FastMCP server exposing the query builder as tools.

Tools:
- health: Check Elasticsearch connectivity
- search_documents: Search an index with where-style conditions
- count_documents: Count documents matching conditions
- find_document: Fetch one document by id
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastmcp import FastMCP
from dotenv import load_dotenv

from elastic_query import __version__
from elastic_query.config import get_current_environment
from elastic_query.exceptions import QueryError
from elastic_query.query import Query
from elastic_query.utils.connection import check_connection
from elastic_query.utils.validation import validate_size

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

# Initialize MCP server
mcp = FastMCP("elastic-query")


def build_query(
    index: str,
    doc_type: Optional[str] = None,
    conditions: Optional[List[Dict[str, Any]]] = None,
) -> Query:
    """
    Build a Query from condition dicts.

    Each condition has ``field``, ``value`` and optional ``operator``
    (default ``=``) and ``boolean`` (``and`` or ``or``). A null value
    becomes a missing-field check, negated for ``!=``.
    """
    query = Query(index, doc_type)
    for condition in conditions or []:
        field = condition["field"]
        operator = condition.get("operator", "=")
        boolean = condition.get("boolean", "and")
        if condition.get("value") is None:
            if operator in ("!=", "<>"):
                query.is_not_null(field, boolean)
            else:
                query.is_null(field, boolean)
            continue
        query.where(field, operator, condition["value"], boolean)
    return query


def _error_payload(error: QueryError) -> Dict[str, Any]:
    return {
        "error": error.message,
        "status_code": error.status_code,
        "type": type(error).__name__,
    }


# ========== HEALTH TOOL ==========

def health() -> Dict[str, Any]:
    """
    Check Elasticsearch connectivity and configuration.
    """
    connected = check_connection()
    return {
        "overall_status": "healthy" if connected else "degraded",
        "environment": get_current_environment(),
        "services": {
            "elasticsearch": {
                "service": "elasticsearch",
                "connected": connected,
                "version": __version__,
            }
        },
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


# ========== QUERY TOOLS ==========

def search_documents(
    index: str,
    doc_type: Optional[str] = None,
    conditions: Optional[List[Dict[str, Any]]] = None,
    columns: Optional[List[str]] = None,
    order: Optional[Dict[str, str]] = None,
    offset: int = 0,
    limit: int = 10,
) -> Dict[str, Any]:
    """
    Search an index with where-style conditions.

    Args:
        index: Configured index name
        doc_type: Configured type (defaults to the environment default)
        conditions: List of {field, operator, value, boolean}
        columns: Source fields to return
        order: {field: "asc" | "desc"}
        offset: Pagination offset
        limit: Page size (1-1000)

    Returns:
        Records with total, or an error description
    """
    try:
        query = build_query(index, doc_type, conditions)
        if columns:
            query.pluck(columns)
        if order:
            query.order_by(order)
        query.limit(max(0, offset), validate_size(limit, max_size=1000))
        return query.search(paging=True).to_dict()
    except QueryError as e:
        logger.warning("search_documents failed: %s", e.message)
        return _error_payload(e)


def count_documents(
    index: str,
    doc_type: Optional[str] = None,
    conditions: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    """
    Count documents matching where-style conditions.
    """
    try:
        return {"count": build_query(index, doc_type, conditions).count()}
    except QueryError as e:
        logger.warning("count_documents failed: %s", e.message)
        return _error_payload(e)


def find_document(index: str, doc_id: str, doc_type: Optional[str] = None) -> Dict[str, Any]:
    """
    Fetch one document by id.

    Returns:
        {found, document} with the source and its _id
    """
    try:
        response = Query(index, doc_type).find(doc_id)
    except QueryError as e:
        logger.warning("find_document failed: %s", e.message)
        return _error_payload(e)

    if not response or not response.get("found", True):
        return {"found": False, "document": None}

    document = dict(response.get("_source") or {})
    document["_id"] = response.get("_id", doc_id)
    return {"found": True, "document": document}


# Registered without decorators so the tool functions stay plain callables
for _tool in (health, search_documents, count_documents, find_document):
    mcp.tool()(_tool)


if __name__ == "__main__":
    mcp.run()
