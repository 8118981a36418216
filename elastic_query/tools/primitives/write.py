"""
Primitive write operations for Elasticsearch.
"""

import logging
from typing import Dict, Any, List, Optional

from elasticsearch import Elasticsearch

from elastic_query.exceptions import elastic_errors

logger = logging.getLogger(__name__)


def create_document(
    es: Elasticsearch,
    index: str,
    document: Dict[str, Any],
    doc_id: Optional[Any] = None,
) -> Dict[str, Any]:
    """
    Create a document, failing if the id is already taken.

    Args:
        es: Elasticsearch client
        index: Target index or alias
        document: Document body
        doc_id: Optional id; the engine generates one when omitted

    Returns:
        Raw create response

    Raises:
        ClientError: On a version conflict or rejected document
    """
    with elastic_errors("Elasticsearch create"):
        if doc_id:
            return es.create(index=index, id=doc_id, document=document)
        return es.index(index=index, document=document, op_type="create")


def index_document(
    es: Elasticsearch,
    index: str,
    document: Dict[str, Any],
    doc_id: Optional[Any] = None,
) -> Dict[str, Any]:
    """Create or replace a document."""
    with elastic_errors("Elasticsearch index"):
        if doc_id:
            return es.index(index=index, id=doc_id, document=document)
        return es.index(index=index, document=document)


def update_document(
    es: Elasticsearch,
    index: str,
    doc_id: Any,
    doc: Optional[Dict[str, Any]] = None,
    script: Optional[Dict[str, Any]] = None,
    upsert: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Partially update a document by id.

    Args:
        es: Elasticsearch client
        index: Target index or alias
        doc_id: Document id
        doc: Partial document merged into the stored one
        script: Script to run instead of a partial document
        upsert: Document to create when the id does not exist

    Returns:
        Raw update response
    """
    params: Dict[str, Any] = {"index": index, "id": doc_id}
    if doc is not None:
        params["doc"] = doc
    if script is not None:
        params["script"] = script
    if upsert is not None:
        params["upsert"] = upsert

    with elastic_errors("Elasticsearch update"):
        return es.update(**params)


def update_by_query(es: Elasticsearch, index: str, body: Dict[str, Any]) -> Dict[str, Any]:
    """Run a script over every document matching the body's query."""
    logger.debug("update_by_query %s: %s", index, body)
    with elastic_errors("Elasticsearch update by query"):
        return es.update_by_query(index=index, body=body)


def delete_document(es: Elasticsearch, index: str, doc_id: Any) -> Dict[str, Any]:
    with elastic_errors("Elasticsearch delete"):
        return es.delete(index=index, id=doc_id)


def delete_by_query(es: Elasticsearch, index: str, body: Dict[str, Any]) -> Dict[str, Any]:
    """Delete every document matching the body's query."""
    logger.debug("delete_by_query %s: %s", index, body)
    with elastic_errors("Elasticsearch delete by query"):
        return es.delete_by_query(index=index, body=body)


def bulk_write(es: Elasticsearch, operations: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Send interleaved action/document lines in one bulk request.

    Returns:
        Raw bulk response; per-item failures are reported in ``items``
        with ``errors`` set, not raised
    """
    with elastic_errors("Elasticsearch bulk"):
        response = es.bulk(operations=operations)

    if response.get("errors"):
        logger.warning("Bulk request finished with item errors")
    return response
