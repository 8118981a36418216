"""
Primitive index administration calls.

These are one-call pass-throughs to the indices API with error
translation; no lifecycle logic lives here.
"""

from typing import Dict, Any, Optional

from elasticsearch import Elasticsearch

from elastic_query.exceptions import elastic_errors


def get_index_stats(es: Elasticsearch, index: str) -> Dict[str, Any]:
    """
    Get statistics for one index.

    Returns:
        The index's entry of the stats response (empty if absent)
    """
    with elastic_errors("Failed to get index stats"):
        response = es.indices.stats(index=index)
    return response.get("indices", {}).get(index, {})


def validate_query(es: Elasticsearch, index: str, body: Dict[str, Any]) -> bool:
    """Ask the engine whether a query body is valid."""
    with elastic_errors("Elasticsearch validate query"):
        response = es.indices.validate_query(index=index, body=body)
    return bool(response.get("valid", False))


def create_index(
    es: Elasticsearch,
    index: str,
    settings: Optional[Dict[str, Any]] = None,
    mappings: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    with elastic_errors("Elasticsearch create index"):
        return es.indices.create(index=index, settings=settings or {}, mappings=mappings or {})


def put_mapping(es: Elasticsearch, index: str, mappings: Dict[str, Any]) -> Dict[str, Any]:
    with elastic_errors("Elasticsearch put mapping"):
        return es.indices.put_mapping(index=index, body=mappings)


def delete_index(es: Elasticsearch, index: str) -> Dict[str, Any]:
    with elastic_errors("Elasticsearch delete index"):
        return es.indices.delete(index=index)


def put_alias(es: Elasticsearch, index: str, name: str) -> Dict[str, Any]:
    with elastic_errors("Elasticsearch put alias"):
        return es.indices.put_alias(index=index, name=name)


def alias_exists(es: Elasticsearch, index: str, name: str) -> bool:
    with elastic_errors("Elasticsearch exists alias"):
        return bool(es.indices.exists_alias(index=index, name=name))


def delete_alias(es: Elasticsearch, index: str, name: str) -> Dict[str, Any]:
    with elastic_errors("Elasticsearch delete alias"):
        return es.indices.delete_alias(index=index, name=name)


def swap_alias(es: Elasticsearch, alias: str, old_index: str, new_index: str) -> Dict[str, Any]:
    """Atomically move an alias from one index to another."""
    actions = [
        {"remove": {"index": old_index, "alias": alias}},
        {"add": {"index": new_index, "alias": alias}},
    ]
    with elastic_errors("Elasticsearch update aliases"):
        return es.indices.update_aliases(actions=actions)


def put_template(es: Elasticsearch, name: str, body: Dict[str, Any]) -> Dict[str, Any]:
    with elastic_errors("Elasticsearch put template"):
        return es.indices.put_template(name=name, body=body)


def delete_template(es: Elasticsearch, name: str) -> Dict[str, Any]:
    with elastic_errors("Elasticsearch delete template"):
        return es.indices.delete_template(name=name)
