"""
Primitive read operations: search, scroll, count and document lookup.
"""

import logging
from typing import Dict, Any, List, Optional

from elasticsearch import Elasticsearch

from elastic_query.exceptions import NotFound, elastic_errors
from elastic_query.query_types.primitives import SearchRequest

logger = logging.getLogger(__name__)


def execute_search(es: Elasticsearch, request: SearchRequest) -> Dict[str, Any]:
    """
    Execute an assembled search request.

    Args:
        es: Elasticsearch client
        request: Assembled search request

    Returns:
        Raw Elasticsearch response

    Raises:
        NotFound: If the index does not exist
        ClientError: If the engine rejects the request
    """
    params = request.to_params()
    logger.debug("search %s: %s", request.index, params["body"])

    with elastic_errors("Elasticsearch query"):
        return es.search(**params)


def scroll_search(es: Elasticsearch, scroll_id: str, scroll: str = "30s") -> Dict[str, Any]:
    """
    Continue scrolling through search results.

    Must be called after an initial search with a scroll parameter. A
    cursor used past its expiry surfaces as ``NotFound``.

    Args:
        es: Elasticsearch client
        scroll_id: Scroll ID from the previous batch
        scroll: Expiry to extend the cursor by (e.g. "30s", "1m")

    Returns:
        Raw response holding the next batch
    """
    with elastic_errors("Elasticsearch scroll"):
        return es.scroll(scroll_id=scroll_id, scroll=scroll)


def clear_scroll(es: Elasticsearch, scroll_id: str) -> bool:
    """
    Release a scroll cursor.

    A 404 means the cursor was unknown or had already expired; it is
    logged and reported as False instead of raised.

    Returns:
        True when the engine reports the cursor freed, False on a 404
    """
    try:
        with elastic_errors("Elasticsearch clear scroll"):
            response = es.clear_scroll(scroll_id=scroll_id)
    except NotFound:
        logger.warning("Scroll %s was already released", scroll_id)
        return False

    return bool(response.get("succeeded", True))


def count_documents(es: Elasticsearch, index: str, body: Dict[str, Any]) -> int:
    """
    Count documents matching a body.

    Returns:
        Matching document count (0 when the engine omits it)
    """
    with elastic_errors("Elasticsearch count"):
        response = es.count(index=index, body=body)
    return int(response.get("count", 0))


def get_document(es: Elasticsearch, index: str, doc_id: Any) -> Optional[Dict[str, Any]]:
    """
    Fetch a single document by id.

    Returns:
        Raw get response, or None when the document does not exist
    """
    try:
        with elastic_errors("Elasticsearch get"):
            return es.get(index=index, id=doc_id)
    except NotFound:
        logger.info("Document %s not found in %s", doc_id, index)
        return None


def multi_get(es: Elasticsearch, docs: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Fetch several documents, possibly across indices, in one request."""
    with elastic_errors("Elasticsearch mget"):
        return es.mget(body={"docs": docs})
