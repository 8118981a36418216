"""
Response parsing utilities for Elasticsearch.
"""

from typing import Dict, Any, List, Optional, Union

from elastic_query.query_types.primitives import Metric, SearchResult


def parse_hits(response: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Extract hits from search response.

    Args:
        response: Elasticsearch response

    Returns:
        List of hit documents
    """
    return (response or {}).get("hits", {}).get("hits", [])


def parse_total(response: Dict[str, Any]) -> int:
    """
    Extract the total hit count.

    Handles both the plain integer and the ``{"value": n}`` shape.
    """
    total = (response or {}).get("hits", {}).get("total", 0)
    if isinstance(total, dict):
        total = total.get("value", 0)
    return int(total or 0)


def has_total(response: Optional[Dict[str, Any]]) -> bool:
    return bool(response) and "total" in response.get("hits", {})


def parse_aggregations(response: Dict[str, Any]) -> Dict[str, Any]:
    """
    Extract aggregations from response.

    Args:
        response: Elasticsearch response

    Returns:
        Aggregations dict
    """
    return (response or {}).get("aggregations", {})


def extract_metric_value(
    response: Dict[str, Any],
    metric: Union[Metric, str, None] = None,
) -> Any:
    """
    Read the value of the ``total`` metric aggregation.

    The engine answers ``aggregations.total.value``; a response nested
    one level deeper under the metric name is accepted as well.
    """
    total = parse_aggregations(response).get("total", {})
    if "value" in total:
        return total["value"]
    if metric is not None:
        return total.get(Metric(metric).value, {}).get("value")
    return None


def output_format(response: Dict[str, Any]) -> SearchResult:
    """
    Flatten a search response into a list of documents.

    Each hit's ``_source`` is returned with its ``_id`` injected. A
    response without hits gives an empty result, not an error.

    Args:
        response: Search or scroll response

    Returns:
        SearchResult with ``total`` and ``scroll_id`` set
    """
    hits = parse_hits(response)
    scroll_id = (response or {}).get("_scroll_id")
    if not hits:
        return SearchResult([], total=parse_total(response), scroll_id=scroll_id)

    records = []
    for hit in hits:
        record = dict(hit.get("_source") or {})
        record["_id"] = hit.get("_id")
        records.append(record)

    return SearchResult(records, total=parse_total(response), scroll_id=scroll_id)
